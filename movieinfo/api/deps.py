from fastapi import Depends, Request

from movieinfo.core.container import AppContainer
from movieinfo.core.settings import Settings


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_app_settings(container: AppContainer = Depends(get_container)) -> Settings:
    return container.settings
