"""
Main application of the BloomCare pregnancy companion.

This module configures logging and launches the Gradio interface.
"""

import logging
import os

from bloomcare.config.constants import SERVER_PORT
from bloomcare.ui.gradio_interface import create_interface


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    demo = create_interface()
    demo.launch(
        server_name="0.0.0.0",
        server_port=int(os.getenv("SERVER_PORT", SERVER_PORT)),
        share=False
    )


if __name__ == "__main__":
    main()
