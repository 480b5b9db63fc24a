"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views
from api.v1 import expense_views as expense_api_views
from api.v1 import hrm_views as hrm_api_views
from api.v1 import report_views as report_api_views
from goals import goal_views as goal_api_views
from api.auth_views import (
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    LogoutAPIView,
    CSRFTokenAPIView,
)

router = DefaultRouter()
router.register(r'employees', hrm_api_views.EmployeeViewSet, basename='employee')
router.register(r'attendance', hrm_api_views.AttendanceViewSet, basename='attendance')
router.register(r'leaves', hrm_api_views.LeaveRequestViewSet, basename='leave')
router.register(r'performance-reviews', hrm_api_views.PerformanceReviewViewSet, basename='performance-review')
router.register(r'exit-formalities', hrm_api_views.ExitFormalityViewSet, basename='exit-formality')
router.register(r'expenses', expense_api_views.ExpenseViewSet, basename='expense')
router.register(r'goals', goal_api_views.GoalViewSet, basename='goal')
router.register(r'kpis', goal_api_views.KPIViewSet, basename='kpi')
router.register(r'users', v1_views.UserViewSet, basename='user')


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),

    # Auth endpoints
    path('auth/csrf/', CSRFTokenAPIView.as_view(), name='auth-csrf'),
    path('auth/token/', CookieTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', LogoutAPIView.as_view(), name='auth-logout'),
    path('auth/me/', v1_views.MeView.as_view(), name='auth-me'),
    path('auth/password/change/', v1_views.ChangePasswordView.as_view(), name='auth-password-change'),

    # Dashboard
    path('dashboard/', v1_views.DashboardView.as_view(), name='dashboard'),

    # Goals
    path('goals-overview/', goal_api_views.GoalsOverviewView.as_view(), name='goals-overview'),

    # Reports
    path('reports/attendance/', report_api_views.AttendanceReportView.as_view(), name='report-attendance'),
    path('reports/attendance/export/', report_api_views.AttendanceReportExportView.as_view(), name='report-attendance-export'),
    path(
        'reports/attendance/<uuid:employee_id>/pdf/',
        report_api_views.EmployeeAttendancePDFView.as_view(),
        name='report-attendance-employee-pdf',
    ),
    path('reports/leaves/export/', report_api_views.LeaveReportExportView.as_view(), name='report-leaves-export'),
]
