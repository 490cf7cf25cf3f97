from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.play_arena.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.play_arena.app.command.check_in_use_case import CheckInUseCase
from src.service.play_arena.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.play_arena.app.command.join_booking_use_case import JoinBookingUseCase
from src.service.play_arena.app.command.update_booking_use_case import UpdateBookingUseCase
from src.service.play_arena.app.query.get_booking_use_case import GetBookingUseCase
from src.service.play_arena.app.query.list_my_bookings_use_case import ListMyBookingsUseCase
from src.service.play_arena.app.query.list_open_bookings_use_case import (
    ListOpenBookingsUseCase,
)
from src.service.play_arena.driving_adapter.http_controller.auth.caller_identity import (
    get_caller_identity,
)
from src.service.play_arena.driving_adapter.http_controller.schema.api_response import (
    ApiResponse,
)
from src.service.play_arena.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    BookingUpdateRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    identity: str = Depends(get_caller_identity),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('resource_type', request.resource_type)
        span.set_attribute('caller', identity)

        booking = await use_case.create_booking(
            creator=identity,
            mode=request.mode,
            resource_type=request.resource_type,
            slot_date=request.slot_date,
            start_time=request.start_time,
            end_time=request.end_time,
            location=request.location,
            invitees=request.invitees,
        )

        span.set_attribute('booking.id', str(booking.id))
        return ApiResponse(
            message='Booking created', data=BookingResponse.from_booking(booking)
        )


# Static paths before /{booking_id}


@router.get('/my')
@Logger.io
async def list_my_bookings(
    identity: str = Depends(get_caller_identity),
    use_case: ListMyBookingsUseCase = Depends(ListMyBookingsUseCase.depends),
) -> ApiResponse[List[BookingResponse]]:
    views = await use_case.list_my_bookings(identity=identity)
    return ApiResponse(
        message='Bookings fetched', data=[BookingResponse.from_view(v) for v in views]
    )


@router.get('/open')
@Logger.io
async def list_open_bookings(
    slot_date: Optional[str] = Query(None, alias='date'),
    resource_type: Optional[str] = None,
    identity: str = Depends(get_caller_identity),
    use_case: ListOpenBookingsUseCase = Depends(ListOpenBookingsUseCase.depends),
) -> ApiResponse[List[BookingResponse]]:
    bookings = await use_case.list_open_bookings(slot_date=slot_date, resource_type=resource_type)
    return ApiResponse(
        message='Open bookings fetched',
        data=[BookingResponse.from_booking(b) for b in bookings],
    )


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    identity: str = Depends(get_caller_identity),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    view = await use_case.get_booking(booking_id=booking_id)
    return ApiResponse(message='Booking fetched', data=BookingResponse.from_view(view))


@router.post('/{booking_id}/join')
@Logger.io
async def join_booking(
    booking_id: UtilsUUID7,
    identity: str = Depends(get_caller_identity),
    use_case: JoinBookingUseCase = Depends(JoinBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.join(booking_id=booking_id, identity=identity)
    return ApiResponse(message='Joined booking', data=BookingResponse.from_booking(booking))


@router.post('/{booking_id}/checkin')
@Logger.io
async def check_in(
    booking_id: UtilsUUID7,
    identity: str = Depends(get_caller_identity),
    use_case: CheckInUseCase = Depends(CheckInUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.check_in(booking_id=booking_id, identity=identity)
    return ApiResponse(message='Checked in', data=BookingResponse.from_booking(booking))


@router.put('/{booking_id}')
@Logger.io
async def update_booking(
    booking_id: UtilsUUID7,
    request: BookingUpdateRequest,
    identity: str = Depends(get_caller_identity),
    use_case: UpdateBookingUseCase = Depends(UpdateBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.update(
        booking_id=booking_id,
        identity=identity,
        resource_type=request.resource_type,
        slot_date=request.slot_date,
        start_time=request.start_time,
        end_time=request.end_time,
        location=request.location,
        invitees=request.invitees,
    )
    return ApiResponse(message='Booking updated', data=BookingResponse.from_booking(booking))


@router.delete('/{booking_id}')
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    identity: str = Depends(get_caller_identity),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.cancel(booking_id=booking_id, identity=identity)
    return ApiResponse(message='Booking cancelled', data=BookingResponse.from_booking(booking))
