from fastapi import APIRouter

from app.api.routes import activity, auth, board, comments, projects, tasks, users


api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(board.router)
api_router.include_router(tasks.router)
api_router.include_router(comments.router)
api_router.include_router(activity.router)
api_router.include_router(users.router)
