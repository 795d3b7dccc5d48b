from fastapi import APIRouter, Depends

from ticketd.auth.dependencies import get_current_admin
from ticketd.clients.router import router as clients_router
from ticketd.forms.router import router as forms_router
from ticketd.submissions.router import router as submissions_router

admin_router = APIRouter(dependencies=[Depends(get_current_admin)])

admin_router.include_router(clients_router)
admin_router.include_router(forms_router)
admin_router.include_router(submissions_router)
