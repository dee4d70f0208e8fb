import logging

from ytzip.app import create_app, start_api

app = create_app()

if __name__ == "__main__":
    logging.getLogger("ytzip").info("Starting ytzip server...")
    start_api(app)
