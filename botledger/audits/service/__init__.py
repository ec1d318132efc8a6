from .audits_service import AuditsService, audits_service
from .streaks import analyze_streaks

__all__ = ["AuditsService", "audits_service", "analyze_streaks"]
