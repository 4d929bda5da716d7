from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

router = APIRouter(tags=['admin'])

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / 'templates'
CREATE_TEACHER_PATH = '/admin/teacher/create'

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get('/teacher', response_class=HTMLResponse)
def teacher_menu(request: Request):
    return templates.TemplateResponse(
        request,
        'menu_teacher.html',
        {
            'title': 'Teachers',
            'create_teacher_url': CREATE_TEACHER_PATH,
            'link_label': 'Register New Teacher',
        },
    )
