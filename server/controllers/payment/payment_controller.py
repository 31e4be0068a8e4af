from flask_restful import Resource
from flask import request, g
from server.schemas import PaymentSchema, PaymentCreateSchema, PaymentRejectSchema
from server.service.payment_processor import submit_payment
from server.service.payment_verification import (
    accept_payment, reject_payment, pending_verifications
)
from server.utils.decorators import login_required
from server.utils.restful import LedgerApi
from . import payment_bp

api = LedgerApi(payment_bp)

# Schemas
payment_schema = PaymentSchema()
payments_schema = PaymentSchema(many=True)
payment_create_schema = PaymentCreateSchema()
payment_reject_schema = PaymentRejectSchema()


class PaymentListResource(Resource):

    @login_required
    def post(self):
        data = payment_create_schema.load(request.get_json() or {})

        payment = submit_payment(
            loan_id=data["loan_id"],
            payer_id=g.current_user.id,
            amount=data["amount"],
            method=data["payment_method"],
            screenshot_url=data.get("screenshot_url"),
        )
        return {
            "message": "Payment submitted successfully",
            "payment": payment_schema.dump(payment),
        }, 201


class PendingPaymentsResource(Resource):

    @login_required
    def get(self):
        payments = pending_verifications(g.current_user.id)
        return {"payments": payments_schema.dump(payments)}, 200


class PaymentAcceptResource(Resource):

    @login_required
    def post(self, payment_id):
        payment = accept_payment(payment_id, g.current_user.id)
        return {
            "message": "Payment accepted",
            "payment": payment_schema.dump(payment),
        }, 200


class PaymentRejectResource(Resource):

    @login_required
    def post(self, payment_id):
        data = payment_reject_schema.load(request.get_json() or {})
        payment = reject_payment(payment_id, g.current_user.id, data["reason"])
        return {
            "message": "Payment rejected",
            "payment": payment_schema.dump(payment),
        }, 200


api.add_resource(PaymentListResource, "/payments")
api.add_resource(PendingPaymentsResource, "/payments/pending")
api.add_resource(PaymentAcceptResource, "/payments/<int:payment_id>/accept")
api.add_resource(PaymentRejectResource, "/payments/<int:payment_id>/reject")
