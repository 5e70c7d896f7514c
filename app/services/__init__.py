"""Services package: expose all concrete services from one import."""
from .base import MutationResult, PageService, PageState
from .auth_service import AuthService, LoginResult
from .stands_service import ManageStandsService, StandsPageState
from .rooms_service import ManageRoomsService, RoomsPageState
from .ranking_service import RankingService, RankingPageState
from .theme_service import ThemeService
from .about_service import AboutService
from .criteria_service import CriteriaPageState, ManageCriteriaService
from .evaluation_service import EvaluationPageState, EvaluationService
from .dashboard_service import DashboardService, DashboardState

__all__ = [
    'MutationResult',
    'PageService',
    'PageState',
    'AuthService',
    'LoginResult',
    'ManageStandsService',
    'StandsPageState',
    'ManageRoomsService',
    'RoomsPageState',
    'RankingService',
    'RankingPageState',
    'ThemeService',
    'AboutService',
    'ManageCriteriaService',
    'CriteriaPageState',
    'EvaluationService',
    'EvaluationPageState',
    'DashboardService',
    'DashboardState',
]
