import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from relief_auth.app import create_app
from relief_auth.infra.config.settings import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
