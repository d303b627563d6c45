import gradio as gr

from bloomcare.config.constants import MOOD_OPTIONS
from bloomcare.ui.processors import (
    process_account_deletion,
    process_ai_status,
    process_chat,
    process_daily_report,
    process_feedback,
    process_feedback_insights,
    process_history,
    process_pdf_export,
    process_registration,
)


def create_interface():
    with gr.Blocks(
        title="BloomCare Pregnancy Companion",
        theme=gr.themes.Soft()
    ) as demo:
        _add_header()

        user_id = gr.Textbox(
            label="User ID",
            placeholder="Your user id, e.g. maria@example.com",
            info="Used to store your reports and conversations"
        )

        with gr.Tabs():
            with gr.Tab("👤 Profile"):
                _add_profile_tab(user_id)
            with gr.Tab("📊 Daily Report"):
                _add_daily_report_tab(user_id)
            with gr.Tab("💬 Dr. AI Chat"):
                _add_chat_tab(user_id)
            with gr.Tab("🗂️ History"):
                _add_history_tab(user_id)

        _add_footer()

    return demo


def _add_header():
    gr.Markdown(
        """
        # 🌸 BloomCare Pregnancy Companion

        Track your daily health, get a personalized report with a risk assessment,
        and ask Dr. AI about your pregnancy week by week.

        **Built with CrewAI, Gemini and Gradio**
        """
    )


def _add_profile_tab(user_id):
    name = gr.Textbox(label="Name", placeholder="Your first name")
    start_date = gr.Textbox(
        label="Pregnancy Start Date",
        placeholder="YYYY-MM-DD",
        info="Used to keep your pregnancy week up to date"
    )
    current_week = gr.Number(
        label="Current Week",
        value=1,
        minimum=1,
        maximum=40,
        step=1,
        info="Used when no start date is given"
    )
    btn_register = gr.Button("💾 Save Profile", variant="primary")
    status = gr.Markdown(value="")

    gr.Markdown("---")
    btn_delete = gr.Button("🗑️ Delete My Account", variant="stop")
    delete_status = gr.Markdown(value="")

    btn_register.click(
        fn=process_registration,
        inputs=[user_id, name, start_date, current_week],
        outputs=[status]
    )
    btn_delete.click(
        fn=process_account_deletion,
        inputs=[user_id],
        outputs=[delete_status]
    )


def _add_daily_report_tab(user_id):
    with gr.Row():
        with gr.Column(scale=1):
            systolic_bp = gr.Number(
                label="Systolic Pressure (mmHg)",
                value=120,
                minimum=60,
                maximum=250,
                step=1
            )
            diastolic_bp = gr.Number(
                label="Diastolic Pressure (mmHg)",
                value=80,
                minimum=30,
                maximum=150,
                step=1
            )
            blood_sugar = gr.Number(
                label="Blood Sugar (mg/dL)",
                value=100,
                minimum=20,
                maximum=600,
                step=1
            )
        with gr.Column(scale=1):
            weight = gr.Number(
                label="Weight (lbs)",
                value=140,
                minimum=50,
                maximum=500,
                step=0.1
            )
            mood = gr.Dropdown(label="Mood", choices=MOOD_OPTIONS, value=MOOD_OPTIONS[0])
            notes = gr.Textbox(label="Notes", placeholder="Anything else you noticed today", lines=3)

    btn_submit = gr.Button("🚀 Generate Health Report", variant="primary", size="lg")
    output = gr.Markdown(value="Waiting for today's report...")

    with gr.Row():
        btn_pdf = gr.Button("📄 Export Latest Report as PDF", variant="secondary")
    pdf_file = gr.File(label="PDF Report", interactive=False)
    pdf_status = gr.Markdown(value="")

    btn_submit.click(
        fn=process_daily_report,
        inputs=[user_id, systolic_bp, diastolic_bp, blood_sugar, weight, mood, notes],
        outputs=[output],
        show_progress="full"
    )
    btn_pdf.click(
        fn=process_pdf_export,
        inputs=[user_id],
        outputs=[pdf_file, pdf_status]
    )


def _add_chat_tab(user_id):
    with gr.Row():
        btn_status = gr.Button("🔌 Check Dr. AI Connection", variant="secondary", size="sm")
        ai_status = gr.Markdown(value="")

    message = gr.Textbox(
        label="Your Question",
        placeholder="e.g. Can I eat mango? Is back pain normal?",
        lines=2
    )
    btn_ask = gr.Button("💬 Ask Dr. AI", variant="primary")
    answer = gr.Markdown(value="")
    training_id = gr.State(value=None)

    with gr.Accordion("Was this answer helpful?", open=False):
        feedback = gr.Radio(
            label="Feedback",
            choices=["helpful", "partially_helpful", "not_helpful"],
            value="helpful"
        )
        accuracy = gr.Slider(label="Accuracy", minimum=1, maximum=5, step=1, value=5)
        suggestions = gr.Textbox(label="Suggestions", lines=2)
        btn_feedback = gr.Button("Send Feedback")
        feedback_status = gr.Markdown(value="")

    btn_ask.click(
        fn=process_chat,
        inputs=[user_id, message],
        outputs=[answer, training_id],
        show_progress="full"
    )
    btn_feedback.click(
        fn=process_feedback,
        inputs=[training_id, feedback, accuracy, suggestions],
        outputs=[feedback_status]
    )
    btn_status.click(
        fn=process_ai_status,
        inputs=[],
        outputs=[ai_status]
    )


def _add_history_tab(user_id):
    btn_refresh = gr.Button("🔄 Load History", variant="secondary")
    gr.Markdown("### 📈 Daily Reports")
    reports = gr.Markdown(value="")
    gr.Markdown("### 💬 Conversations")
    chats = gr.Markdown(value="")
    gr.Markdown("### 💡 Feedback Insights")
    btn_insights = gr.Button("📊 Show Insights", variant="secondary")
    insights = gr.Markdown(value="")

    btn_refresh.click(
        fn=process_history,
        inputs=[user_id],
        outputs=[reports, chats]
    )
    btn_insights.click(
        fn=process_feedback_insights,
        inputs=[user_id],
        outputs=[insights]
    )


def _add_footer():
    gr.Markdown(
        """
        ---
        ### ℹ️ Information

        - **Risk Assessment**: rule-based scoring of blood pressure, blood sugar, mood and pregnancy week
        - **Health Report**: written by Dr. AI when a Gemini key is configured, otherwise by built-in guidelines
        - **High Risk Alert**: shown when the risk reaches 61% or more

        *BloomCare is not a substitute for professional medical advice.*
        """
    )
