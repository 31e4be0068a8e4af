from flask_restful import Resource
from flask import request, g
from server.schemas.analytics_schema import (
    SummarySchema, CounterpartyBalanceSchema, MonthlySchema, UpcomingDueSchema
)
from server.utils.dashboard_service import DashboardService
from server.utils.decorators import login_required
from server.utils.restful import LedgerApi
from . import analytics_bp

api = LedgerApi(analytics_bp)

summary_schema = SummarySchema()
balances_schema = CounterpartyBalanceSchema(many=True)
monthly_schema = MonthlySchema()
upcoming_schema = UpcomingDueSchema()


class SummaryResource(Resource):
    @login_required
    def get(self):
        return summary_schema.dump(DashboardService.get_summary(g.current_user.id)), 200


class BalancesByUserResource(Resource):
    @login_required
    def get(self):
        balances = DashboardService.get_balances_by_user(g.current_user.id)
        return {"balances": balances_schema.dump(balances)}, 200


class MonthlyResource(Resource):
    @login_required
    def get(self):
        months = request.args.get("months", 6, type=int)
        return monthly_schema.dump(DashboardService.get_monthly_totals(g.current_user.id, months)), 200


class UpcomingDueResource(Resource):
    @login_required
    def get(self):
        days = request.args.get("days", 7, type=int)
        return upcoming_schema.dump(DashboardService.get_upcoming_due(g.current_user.id, days)), 200


api.add_resource(SummaryResource, "/analytics/summary")
api.add_resource(BalancesByUserResource, "/analytics/by-user")
api.add_resource(MonthlyResource, "/analytics/monthly")
api.add_resource(UpcomingDueResource, "/analytics/upcoming-due")
