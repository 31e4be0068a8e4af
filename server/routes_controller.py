from server.controllers.loan import loan_bp
from server.controllers.payment import payment_bp
from server.controllers.notification import notification_bp
from server.controllers.analytics import analytics_bp
from server.controllers.profile import profile_bp

def register_routes(app):
    app.register_blueprint(loan_bp)
    app.register_blueprint(payment_bp)
    app.register_blueprint(notification_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(profile_bp)
