#!/usr/bin/env python3
"""
Startup script for the Trip Concierge API
"""

import uvicorn
import logging
from trip_concierge.utils.config import get_settings, validate_settings

def main():
    """Main startup function"""
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT
    )
    logger = logging.getLogger(__name__)

    try:
        # Missing credentials are reported per request, so only warn here
        if not validate_settings():
            logger.warning("GEMINI_API_KEY is not set; /api/itinerary will answer 500 until it is configured")

        logger.info("Starting Trip Concierge API...")
        logger.info(f"API Version: {settings.API_VERSION}")
        logger.info(f"Gemini API version: {settings.GEMINI_API_VERSION}")
        logger.info(f"Preferred model: {settings.GEMINI_MODEL or 'auto'}")
        logger.info(f"Debug Mode: {settings.DEBUG_MODE}")
        logger.info(f"Host: {settings.API_HOST}:{settings.API_PORT}")

        # Start the server
        uvicorn.run(
            "trip_concierge.api.main:app",
            host=settings.API_HOST,
            port=settings.API_PORT,
            reload=settings.DEBUG_MODE,
            log_level=settings.LOG_LEVEL.lower(),
            access_log=True
        )

    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {str(e)}")
        return 1

    return 0

if __name__ == "__main__":
    exit(main())
