"""
LexScan entry point

    gunicorn app:app
    python app.py
"""
import os

from lexscan import create_app

app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "3000"))
    app.logger.info("Open http://localhost:%d in your browser", port)
    app.run(host="0.0.0.0", port=port)
