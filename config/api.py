"""Django Ninja API configuration."""

from ninja import NinjaAPI

from features.auth.endpoints import router as auth_router
from features.crud.goal_bank.endpoints import router as goal_bank_router
from features.crud.goal_spaces.endpoints import router as goal_spaces_router
from features.crud.goals.endpoints import router as goals_router
from features.crud.users.endpoints import router as users_router
from features.notifications.endpoints import router as notifications_router
from features.workflow.endpoints import router as workflow_router

# Create the main API instance
api = NinjaAPI(
    title="EZPMS API",
    version="1.0.0",
    description="Employee goal setting, approval and review API",
    docs_url="docs",
)

# Register routers
api.add_router("/auth", auth_router, tags=["Authentication"])
api.add_router("/users", users_router, tags=["Users"])
api.add_router("/goals", goals_router, tags=["Goals"])
api.add_router("/workflow", workflow_router, tags=["Goal Workflow"])
api.add_router("/goal-spaces", goal_spaces_router, tags=["Goal Spaces"])
api.add_router("/goal-bank", goal_bank_router, tags=["Goal Bank"])
api.add_router("/notifications", notifications_router, tags=["Notifications"])
