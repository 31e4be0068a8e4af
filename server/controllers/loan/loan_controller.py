from flask_restful import Resource
from flask import request, g
from server.schemas import (
    LoanSchema, LoanCreateSchema, LoanUpdateSchema, LoansWithUserSchema,
    NotificationSchema, ManualReminderSchema
)
from server.service import loan_service
from server.service.notification_inbox import send_manual_reminder
from server.utils.decorators import login_required
from server.utils.restful import LedgerApi
from . import loan_bp

api = LedgerApi(loan_bp)

# Schemas
loan_schema = LoanSchema()
loans_schema = LoanSchema(many=True, exclude=("payments",))
loan_create_schema = LoanCreateSchema()
loan_update_schema = LoanUpdateSchema()
loans_with_user_schema = LoansWithUserSchema()
notification_schema = NotificationSchema()
manual_reminder_schema = ManualReminderSchema()


class LoanListResource(Resource):

    @login_required
    def get(self):
        loans = loan_service.list_loans(g.current_user.id)
        return {
            "loans_given": loans_schema.dump(loans["loans_given"]),
            "loans_taken": loans_schema.dump(loans["loans_taken"]),
        }, 200

    @login_required
    def post(self):
        data = loan_create_schema.load(request.get_json() or {})

        loan = loan_service.create_loan(
            lender_id=g.current_user.id,
            borrower_id=data["borrower_id"],
            amount=data["amount"],
            currency=data.get("currency"),
            description=data.get("description"),
            due_date=data.get("due_date"),
        )
        return {
            "message": "Loan created successfully",
            "loan": loan_schema.dump(loan),
        }, 201


class LoanResource(Resource):

    @login_required
    def get(self, loan_id):
        loan = loan_service.get_loan(loan_id, g.current_user.id)
        return {"loan": loan_schema.dump(loan)}, 200

    @login_required
    def put(self, loan_id):
        changes = loan_update_schema.load(request.get_json() or {})
        loan = loan_service.update_loan(loan_id, g.current_user.id, changes)
        return {
            "message": "Loan updated successfully",
            "loan": loan_schema.dump(loan),
        }, 200

    @login_required
    def delete(self, loan_id):
        loan_service.delete_loan(loan_id, g.current_user.id)
        return {"message": "Loan deleted successfully"}, 200


class LoansWithUserResource(Resource):

    @login_required
    def get(self, user_id):
        result = loan_service.loans_with_user(g.current_user.id, user_id)
        return loans_with_user_schema.dump(result), 200


class LoanReminderResource(Resource):

    @login_required
    def post(self, loan_id):
        data = manual_reminder_schema.load(request.get_json(silent=True) or {})
        notification = send_manual_reminder(loan_id, g.current_user.id, data.get("message"))
        return {
            "message": "Reminder sent successfully",
            "notification": notification_schema.dump(notification),
        }, 200


api.add_resource(LoanListResource, "/loans")
api.add_resource(LoanResource, "/loans/<int:loan_id>")
api.add_resource(LoansWithUserResource, "/loans/with-user/<int:user_id>")
api.add_resource(LoanReminderResource, "/loans/<int:loan_id>/remind")
