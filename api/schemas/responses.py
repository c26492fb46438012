"""Response schemas for the API."""

from typing import Optional

from pydantic import BaseModel


class FulfillmentRecordResponse(BaseModel):
    """Persisted fulfillment record."""
    id: Optional[str] = None
    claim_id: str
    excess_paid: bool
    excess_amount: Optional[str] = None
    excess_payment_method: Optional[str] = None
    excess_payment_date: Optional[str] = None
    device_value: Optional[str] = None
    fulfillment_type: Optional[str] = None  # in_home_repair|collection_repair|voucher
    repairer_id: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_slot: Optional[str] = None
    engineer_reference: Optional[str] = None
    logistics_reference: Optional[str] = None
    status: str  # pending_excess|awaiting_appointment|scheduled|completed
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FlowViewResponse(BaseModel):
    """Fulfillment screen state for a claim."""
    claim_id: str
    claim_number: Optional[str] = None
    claim_status: Optional[str] = None
    step: int  # 1 excess, 4 schedule, 5 complete
    record: Optional[FulfillmentRecordResponse] = None
    device_category: str
    device_value: Optional[str] = None
    requires_in_home_repair: bool
    policy_excess: str
    payment_on_file_available: bool
    coverage_area: Optional[str] = None
    selected_repairer_id: Optional[str] = None
    repairer_name: Optional[str] = None
    notices: list[str] = []


class RecommendationResponse(BaseModel):
    """One ranked repairer."""
    repairer_id: str
    repairer_name: str
    rank: int
    rank_label: str
    score: float
    reasoning: str
    key_advantages: list[str]


class SLAResponse(BaseModel):
    device_category: str
    response_time_hours: int
    repair_time_hours: int
    availability_hours: Optional[str] = None
    quality_score: float
    success_rate: float
    notes: Optional[str] = None


class EligibleRepairerResponse(BaseModel):
    id: str
    name: str
    connectivity_type: str
    next_appointment: str
    slas: list[SLAResponse]


class RecommendationsResponse(BaseModel):
    """Recommendation service result plus any failure notices."""
    claim_id: str
    device_category: str
    recommendations: list[RecommendationResponse]
    overall_analysis: str
    eligible_repairers: list[EligibleRepairerResponse]
    notices: list[str] = []


class AvailabilityResponse(BaseModel):
    """Fully booked dates in the look-ahead window."""
    repairer_id: str
    unavailable_dates: list[str]
    first_available_date: Optional[str] = None


class SlotsResponse(BaseModel):
    """Bookable slots on one date."""
    repairer_id: str
    date: str
    slots: list[str]


class DemoClaim(BaseModel):
    """A pre-built demo claim."""
    claim_id: str
    claim_number: str
    name: str
    description: str
    product_name: str
    purchase_price: Optional[str] = None
    excess_amount: str
    payment_on_file: bool
    coverage_area: Optional[str] = None
    expected_fulfillment: str


class ErrorResponse(BaseModel):
    """Body of every workflow error response."""
    code: str
    message: str
    details: Optional[dict] = None
    claim_id: Optional[str] = None
