import logging
import os
import sys
import traceback

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)


def main() -> None:
    try:
        from clinicslots.core.config import get_settings

        settings = get_settings()
        host = os.environ.get("HOST", settings.host)
        port = int(os.environ.get("PORT", settings.port))
        logger.info(f"Starting {settings.app_name} on {host}:{port} (env={settings.app_env})")
        uvicorn.run(
            "clinicslots.app:app",
            host=host,
            port=port,
            # Booking locks are per process
            workers=1,
            log_level="info",
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        logger.info("Shutting down due to keyboard interrupt")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        logger.error(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
