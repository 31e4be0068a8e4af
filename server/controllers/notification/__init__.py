from flask import Blueprint

notification_bp = Blueprint('notification_bp', __name__)

from .notification_controller import *
