import logging

import uvicorn

from grocery.api.api_run import app
from grocery.utilities import config


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if config.DEBUG else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    host = config.APP_HOST
    port = config.APP_PORT
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Uvicorn running on http://localhost:{port} (Press CTRL+C to quit)")
    print(f"Store backend: {config.STORE_BACKEND}, auth mode: {config.AUTH_MODE}")
    uvicorn.run(app, host=host, port=port)
