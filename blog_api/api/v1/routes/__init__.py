from fastapi import APIRouter

from blog_api.modules.comments.routes import router as comments_router
from blog_api.modules.links.routes import router as links_router
from blog_api.modules.posts.routes import router as posts_router
from blog_api.modules.uploads.routes import router as uploads_router

api_router = APIRouter()
api_router.include_router(posts_router)
api_router.include_router(comments_router)
api_router.include_router(uploads_router)
api_router.include_router(links_router)
