# chat_service.py
import logging

import uvicorn
from dotenv import load_dotenv

from api import create_app
from config import get_port

load_dotenv()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_port())
