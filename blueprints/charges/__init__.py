from flask import Blueprint

charges_bp = Blueprint('charges', __name__)

from . import routes
