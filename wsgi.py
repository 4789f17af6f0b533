from menuplanner import create_app
import logging

try:
    app = create_app()

    if __name__ == '__main__':
        app.run(debug=True)
except Exception:
    logging.getLogger(__name__).exception("Error starting the Flask app")
    raise
