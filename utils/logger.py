import logging
import logging.config


def setup_logger(portal_config=None):
    """Настройка корневого логгера по конфигурации портала"""
    if portal_config is None:
        from config import config as portal_config

    if portal_config.log_to_file:
        portal_config.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(portal_config.get_logging_config())
    return logging.getLogger()
