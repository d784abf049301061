import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from crowdsense.common.config import ConfigManager
from crowdsense.common.logging import setup_logger
from crowdsense.crowd.application.builder import CrowdApplicationBuilder
from crowdsense.crowd.presentation.api import app, init_app


@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    crowd_cfg = ConfigManager.from_raw(cfg.crowd)
    logger = setup_logger("crowdsense", crowd_cfg.log_level)
    logger.info(f"Configuration loaded (storage={crowd_cfg.storage.type}, scale={crowd_cfg.classification.scale})")

    # Build service and wire routes
    components = CrowdApplicationBuilder(crowd_cfg).get_components()
    init_app(components)

    server_cfg = crowd_cfg.server
    logger.info(f"Starting server at http://{server_cfg.host}:{server_cfg.port}")
    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)


if __name__ == "__main__":
    main()
