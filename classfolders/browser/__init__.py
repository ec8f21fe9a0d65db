from flask import Blueprint

browser_bp = Blueprint(
    "browser",
    __name__,
    template_folder="../templates/browser"
)

from . import routes
