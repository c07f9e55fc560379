# Settings, models and helpers shared by the clients, the server and the CLI
from lcpconsole.common.config import Config as Config
from lcpconsole.common.crypto import CryptoUtils as CryptoUtils
from lcpconsole.common.logging_utils import setup_logger as setup_logger
from lcpconsole.common.mixins import Configurable as Configurable

__all__ = ["Config", "Configurable", "CryptoUtils", "setup_logger"]
