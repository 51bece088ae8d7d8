from src.teamdesk.services.roster_service import RosterEntry, RosterService
from src.teamdesk.services.team_service import InviteResult, TeamService

__all__ = ["InviteResult", "RosterEntry", "RosterService", "TeamService"]
