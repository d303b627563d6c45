import json
import logging
import os
import sqlite3
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from bloomcare.config.constants import (
    CHAT_HISTORY_LIMIT,
    DEFAULT_DB_PATH,
    TRAINING_PATTERN_LIMIT,
)
from bloomcare.models.chat import ChatExchange, TrainingFeedback
from bloomcare.models.health import HealthSnapshot, PatientProfile, RiskAssessment
from bloomcare.models.report import DailyReport, GeneratedReport

logger = logging.getLogger(__name__)

_QUESTION_TYPES = {
    "nausea": ("nausea", "sick"),
    "exercise": ("exercise", "workout"),
    "nutrition": ("food", "eat"),
}
DEFAULT_PREFERRED_RESPONSE_LENGTH = 500


class StorageService:
    """SQLite persistence for patients, daily reports, chat history and training data."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or os.getenv("BLOOMCARE_DB_PATH", DEFAULT_DB_PATH)
        self.init_db()

    def get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self):
        conn = self.get_conn()
        try:
            cur = conn.cursor()
            cur.execute("""CREATE TABLE IF NOT EXISTS patients (
                user_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                pregnancy_start_date TEXT,
                current_week INTEGER DEFAULT 1,
                created_at TEXT
            )""")

            cur.execute("""CREATE TABLE IF NOT EXISTS daily_reports (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                created_at TEXT,
                snapshot TEXT,
                assessment TEXT,
                report TEXT,
                report_generated INTEGER DEFAULT 0
            )""")

            cur.execute("""CREATE TABLE IF NOT EXISTS chat_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                question TEXT NOT NULL,
                answer TEXT NOT NULL,
                timestamp TEXT
            )""")

            cur.execute("""CREATE TABLE IF NOT EXISTS training_data (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                user_question TEXT NOT NULL,
                ai_response TEXT NOT NULL,
                user_context TEXT,
                user_feedback TEXT,
                response_accuracy INTEGER,
                improvement_suggestions TEXT,
                timestamp TEXT
            )""")
            conn.commit()
        finally:
            conn.close()

    # ------------------ Patients ------------------ #

    def upsert_patient(self, patient: PatientProfile) -> PatientProfile:
        conn = self.get_conn()
        try:
            conn.execute("""
                INSERT INTO patients (user_id, name, pregnancy_start_date, current_week, created_at)
                VALUES (?,?,?,?,?)
                ON CONFLICT(user_id) DO UPDATE SET
                    name=excluded.name,
                    pregnancy_start_date=excluded.pregnancy_start_date,
                    current_week=excluded.current_week
            """, (
                patient.user_id,
                patient.name,
                patient.pregnancy_start_date.isoformat() if patient.pregnancy_start_date else None,
                patient.current_week,
                datetime.now().isoformat(),
            ))
            conn.commit()
        finally:
            conn.close()
        return patient

    def get_patient(self, user_id: str) -> Optional[PatientProfile]:
        conn = self.get_conn()
        try:
            row = conn.execute("SELECT * FROM patients WHERE user_id=?", (user_id,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        start = row["pregnancy_start_date"]
        return PatientProfile(
            user_id=row["user_id"],
            name=row["name"],
            pregnancy_start_date=date.fromisoformat(start) if start else None,
            current_week=row["current_week"],
        )

    def update_current_week(self, user_id: str, week: int):
        conn = self.get_conn()
        try:
            conn.execute("UPDATE patients SET current_week=? WHERE user_id=?", (week, user_id))
            conn.commit()
        finally:
            conn.close()

    # ------------------ Daily reports ------------------ #

    def add_daily_report(self, record: DailyReport) -> DailyReport:
        conn = self.get_conn()
        try:
            cur = conn.execute("""
                INSERT INTO daily_reports (user_id, created_at, snapshot, assessment, report, report_generated)
                VALUES (?,?,?,?,?,?)
            """, (
                record.user_id,
                record.created_at.isoformat(),
                record.snapshot.model_dump_json(),
                record.assessment.model_dump_json(),
                record.report.model_dump_json() if record.report else None,
                int(record.report_generated),
            ))
            conn.commit()
            report_id = cur.lastrowid
        finally:
            conn.close()
        return record.model_copy(update={"id": report_id})

    def update_daily_report(self, record: DailyReport):
        if record.id is None:
            raise ValueError("Cannot update a daily report that was never saved.")
        conn = self.get_conn()
        try:
            conn.execute("""
                UPDATE daily_reports SET assessment=?, report=?, report_generated=?
                WHERE id=? AND user_id=?
            """, (
                record.assessment.model_dump_json(),
                record.report.model_dump_json() if record.report else None,
                int(record.report_generated),
                record.id,
                record.user_id,
            ))
            conn.commit()
        finally:
            conn.close()

    def get_daily_reports(self, user_id: str, limit: Optional[int] = None) -> List[DailyReport]:
        query = "SELECT * FROM daily_reports WHERE user_id=? ORDER BY created_at DESC, id DESC"
        params: tuple = (user_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (user_id, limit)
        conn = self.get_conn()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [self._row_to_report(r) for r in rows]

    def get_daily_report(self, user_id: str, report_id: int) -> Optional[DailyReport]:
        conn = self.get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM daily_reports WHERE id=? AND user_id=?", (report_id, user_id)
            ).fetchone()
        finally:
            conn.close()
        return self._row_to_report(row) if row else None

    def _row_to_report(self, row: sqlite3.Row) -> DailyReport:
        return DailyReport(
            id=row["id"],
            user_id=row["user_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            snapshot=HealthSnapshot.model_validate_json(row["snapshot"]),
            assessment=RiskAssessment.model_validate_json(row["assessment"]),
            report=GeneratedReport.model_validate_json(row["report"]) if row["report"] else None,
            report_generated=bool(row["report_generated"]),
        )

    # ------------------ Chat history ------------------ #

    def add_chat_exchange(self, user_id: str, exchange: ChatExchange):
        conn = self.get_conn()
        try:
            conn.execute(
                "INSERT INTO chat_history (user_id, question, answer, timestamp) VALUES (?,?,?,?)",
                (user_id, exchange.question, exchange.answer, exchange.timestamp.isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def get_chat_history(self, user_id: str, limit: int = CHAT_HISTORY_LIMIT) -> List[ChatExchange]:
        conn = self.get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM chat_history WHERE user_id=? ORDER BY timestamp DESC, id DESC LIMIT ?",
                (user_id, limit),
            ).fetchall()
        finally:
            conn.close()
        return [
            ChatExchange(
                question=r["question"],
                answer=r["answer"],
                timestamp=datetime.fromisoformat(r["timestamp"]),
            )
            for r in rows
        ]

    # ------------------ Training data ------------------ #

    def add_training_record(
        self,
        user_id: str,
        question: str,
        answer: str,
        user_context: Dict[str, Any],
    ) -> int:
        conn = self.get_conn()
        try:
            cur = conn.execute("""
                INSERT INTO training_data (user_id, user_question, ai_response, user_context, timestamp)
                VALUES (?,?,?,?,?)
            """, (user_id, question, answer, json.dumps(user_context), datetime.now().isoformat()))
            conn.commit()
            return cur.lastrowid
        finally:
            conn.close()

    def update_training_feedback(self, training_id: int, feedback: TrainingFeedback) -> bool:
        conn = self.get_conn()
        try:
            cur = conn.execute("""
                UPDATE training_data
                SET user_feedback=?, response_accuracy=?, improvement_suggestions=?
                WHERE id=?
            """, (feedback.feedback, feedback.accuracy, feedback.suggestions, training_id))
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    def analyze_training_data(self) -> Dict[str, Any]:
        conn = self.get_conn()
        try:
            summary = conn.execute("""
                SELECT AVG(response_accuracy) AS avg_accuracy,
                       COUNT(*) AS total_responses,
                       SUM(CASE WHEN user_feedback='helpful' THEN 1 ELSE 0 END) AS helpful_responses
                FROM training_data
            """).fetchone()
            questions = conn.execute("SELECT user_question FROM training_data ORDER BY id").fetchall()
        finally:
            conn.close()
        return {
            "avg_accuracy": summary["avg_accuracy"],
            "total_responses": summary["total_responses"],
            "helpful_responses": summary["helpful_responses"] or 0,
            "common_questions": [q["user_question"] for q in questions],
        }

    def get_personalized_patterns(self, user_id: str) -> Dict[str, Any]:
        conn = self.get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM training_data WHERE user_id=? ORDER BY timestamp DESC, id DESC LIMIT ?",
                (user_id, TRAINING_PATTERN_LIMIT),
            ).fetchall()
        finally:
            conn.close()

        question_types: Dict[str, int] = {}
        helpful_lengths = []
        for row in rows:
            question = row["user_question"].lower()
            for question_type, keywords in _QUESTION_TYPES.items():
                if any(k in question for k in keywords):
                    question_types[question_type] = question_types.get(question_type, 0) + 1
            if row["user_feedback"] == "helpful":
                helpful_lengths.append(len(row["ai_response"]))

        return {
            "common_question_types": question_types,
            "avg_preferred_response_length": (
                sum(helpful_lengths) / len(helpful_lengths)
                if helpful_lengths
                else DEFAULT_PREFERRED_RESPONSE_LENGTH
            ),
            "total_interactions": len(rows),
        }

    # ------------------ Account deletion ------------------ #

    def delete_user_data(self, user_id: str):
        conn = self.get_conn()
        try:
            for table in ("daily_reports", "chat_history", "training_data", "patients"):
                conn.execute(f"DELETE FROM {table} WHERE user_id=?", (user_id,))
            conn.commit()
        finally:
            conn.close()
        logger.info("Deleted all stored data for %s", user_id)
