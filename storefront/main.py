# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.data.database import init_db
from storefront.data.seed import seed
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# tables must exist before the first request
init_db()
seed()

app = create_app()

if __name__ == "__main__":
    logger.info("Starting storefront on 0.0.0.0:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
