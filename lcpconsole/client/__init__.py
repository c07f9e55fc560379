# Resource API and license status clients
from lcpconsole.client.infrastructure.config_loader import ConfigLoader as ConfigLoader
from lcpconsole.client.license_status import LicenseStatusService as LicenseStatusService

__all__ = ["ConfigLoader", "LicenseStatusService"]
