"""Main service entry point for the Dexcom Share Readings API"""

import os
import logging
import uvicorn
from dexcom_share_client.api import app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def run_api_server(host: str = "0.0.0.0", port: int = 8080):
    """Run the REST API server"""
    logger.info(f"Starting Dexcom Share API server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == '__main__':
    port = int(os.getenv('PORT', '8080'))
    run_api_server(port=port)
