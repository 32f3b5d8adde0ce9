from dataclasses import dataclass

from src.lending.core.security import Authenticator
from src.lending.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    authenticator: Authenticator
