import uvicorn
from fastapi.responses import PlainTextResponse

from retail_store import settings
from shop_api import create_app

app = create_app()


# Healthcheck
@app.get("/healthz", response_class=PlainTextResponse)
def healthz():
    return "ok"


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
