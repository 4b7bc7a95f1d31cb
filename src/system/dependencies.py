from src.system.services import HealthService


def get_health_service() -> HealthService:
    return HealthService()
