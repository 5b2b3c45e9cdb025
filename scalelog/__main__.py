import logging

import uvicorn

from scalelog.main import app

settings = app.state.settings

logging.getLogger(__name__).info("listening on %s:%s", settings.HOST, settings.PORT)
uvicorn.run(app, host=settings.HOST, port=settings.PORT)
