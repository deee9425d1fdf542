import uvicorn

from vocabmix.app import create_app
from vocabmix.config import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
