"""Fulfillment workflow endpoints."""

from fastapi import APIRouter

from api.schemas.requests import (
    DeviceValueRequest,
    ExcessPaymentRequest,
    FulfillmentTypeRequest,
    ScheduleRequest,
)
from api.schemas.responses import (
    EligibleRepairerResponse,
    FlowViewResponse,
    RecommendationResponse,
    RecommendationsResponse,
    SLAResponse,
)
from claimflow.engine import FlowView, FulfillmentFlowController, FulfillmentServices

router = APIRouter(prefix="/fulfillment", tags=["Fulfillment"])

# Shared services (set by main.py)
services: FulfillmentServices = None


def set_services(s: FulfillmentServices):
    global services
    services = s


def _controller(claim_id: str) -> FulfillmentFlowController:
    flow = FulfillmentFlowController(claim_id, services)
    flow.load()
    return flow


def _view_response(view: FlowView) -> FlowViewResponse:
    return FlowViewResponse(**view.to_dict())


# Endpoints are sync: card payments block for the simulated processing delay,
# so they run in the threadpool.

@router.get("/{claim_id}", response_model=FlowViewResponse)
def get_fulfillment(claim_id: str):
    """Current fulfillment state of a claim; the step is derived from the record."""
    return _view_response(_controller(claim_id).view)


@router.post("/{claim_id}/excess", response_model=FlowViewResponse)
def pay_excess(claim_id: str, request: ExcessPaymentRequest):
    """
    Pay the excess and route the claim.

    Large items go to an engineer visit, confirmed values under the voucher
    threshold complete with a voucher, everything else is collected.
    """
    flow = _controller(claim_id)
    return _view_response(flow.confirm_excess(request.to_selection()))


@router.post("/{claim_id}/device-value", response_model=FlowViewResponse)
def confirm_device_value(claim_id: str, request: DeviceValueRequest):
    """Re-apply the voucher threshold with a late device value."""
    flow = _controller(claim_id)
    return _view_response(flow.confirm_device_value(request.device_value))


@router.post("/{claim_id}/fulfillment-type", response_model=FlowViewResponse)
def override_fulfillment_type(claim_id: str, request: FulfillmentTypeRequest):
    """Manually correct the fulfillment type and reopen scheduling."""
    flow = _controller(claim_id)
    return _view_response(flow.override_fulfillment_type(request.fulfillment_type))


@router.post("/{claim_id}/schedule", response_model=FlowViewResponse)
def schedule_appointment(claim_id: str, request: ScheduleRequest):
    """Book the engineer visit or collection."""
    flow = _controller(claim_id)
    if request.repairer_id:
        flow.select_repairer(request.repairer_id)
    view = flow.schedule(request.appointment_date, request.slot, request.repairer_id)
    return _view_response(view)


@router.get("/{claim_id}/recommendations", response_model=RecommendationsResponse)
def get_recommendations(claim_id: str):
    """
    Ranked repairers for the claim.

    Recommendation service failures come back as notices with an empty list.
    """
    flow = _controller(claim_id)
    result = flow.load_recommendations()
    view = flow.view

    if result is None:
        return RecommendationsResponse(
            claim_id=claim_id,
            device_category=view.device_category,
            recommendations=[],
            overall_analysis="",
            eligible_repairers=[],
            notices=view.notices,
        )

    return RecommendationsResponse(
        claim_id=claim_id,
        device_category=view.device_category,
        recommendations=[
            RecommendationResponse(
                repairer_id=r.repairer_id,
                repairer_name=r.repairer_name,
                rank=r.rank,
                rank_label=r.rank_label(),
                score=r.score,
                reasoning=r.reasoning,
                key_advantages=r.key_advantages,
            )
            for r in result.recommendations
        ],
        overall_analysis=result.overall_analysis,
        eligible_repairers=[
            EligibleRepairerResponse(
                id=e.id,
                name=e.name,
                connectivity_type=e.connectivity_type,
                next_appointment=e.next_appointment_hint(),
                slas=[SLAResponse(**s.to_dict()) for s in e.slas],
            )
            for e in result.eligible_repairers
        ],
        notices=view.notices,
    )
