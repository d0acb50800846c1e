"""Supabase (PostgREST) booking ledger adapter.

Mutations are stored procedures called through ``/rpc/<name>``; each
returns a one-row result set. Reads go straight to the tables.
"""

import logging
from datetime import date
from typing import Any

import httpx

from seascape.config import settings
from seascape.core.exceptions import ExternalServiceError
from seascape.core.session import Session
from seascape.ledger.base import (
    BookingLedger,
    CreateBookingResult,
    LedgerResult,
    LedgerType,
    SERVICE_NAME,
    RegenerateQRResult,
    ScanResult,
)

logger = logging.getLogger(__name__)

BOOKING_SELECT = "*,yacht:yachts(name,name_ar,location,image_urls,owner_id)"


class SupabaseLedger(BookingLedger):
    """Ledger backed by Supabase tables and stored procedures."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.supabase_rest_url
        self.api_key = api_key or settings.supabase_anon_key
        self.timeout = timeout or settings.ledger_timeout_seconds
        self._transport = transport

    @property
    def ledger_type(self) -> LedgerType:
        return LedgerType.SUPABASE

    def _headers(self, session: Session | None) -> dict[str, str]:
        token = session.access_token if session else self.api_key
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        session: Session | None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            ExternalServiceError: On transport failure or an error envelope
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=self._headers(session),
                )
        except httpx.HTTPError as e:
            logger.error(f"Ledger request {method} {path} failed: {e}")
            raise ExternalServiceError(SERVICE_NAME, str(e))

        if response.status_code >= 400:
            message = f"Ledger returned {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = body["message"]
            except ValueError:
                pass
            logger.warning(f"Ledger error on {method} {path}: {message}")
            raise ExternalServiceError(SERVICE_NAME, message)

        try:
            return response.json()
        except ValueError:
            raise ExternalServiceError(SERVICE_NAME, "Malformed ledger response")

    async def _rpc(self, session: Session, name: str, params: dict[str, Any]) -> dict | None:
        """Call a stored procedure and return its first result row."""
        logger.info(f"Ledger RPC {name} by user {session.user_id}")
        data = await self._request("POST", f"/rpc/{name}", session, json=params)
        if isinstance(data, list):
            return data[0] if data else None
        return data

    async def _select(
        self,
        table: str,
        params: dict[str, str],
        session: Session | None = None,
    ) -> list[dict]:
        data = await self._request("GET", f"/{table}", session, params=params)
        return data if isinstance(data, list) else []

    # Mutations

    async def create_booking(
        self,
        session: Session,
        yacht_id: str,
        booking_date: date,
        time_slot: str,
        seats: int,
        payment_method: str,
    ) -> CreateBookingResult:
        row = await self._rpc(
            session,
            "create_booking",
            {
                "p_yacht_id": yacht_id,
                "p_date": booking_date.isoformat(),
                "p_time_slot": time_slot,
                "p_seats": seats,
                "p_payment_method": payment_method,
            },
        )
        if not row or not row.get("success"):
            return CreateBookingResult(
                success=False,
                error_message=(row or {}).get("error_message") or "Booking failed",
            )
        return CreateBookingResult(
            success=True,
            booking_id=row.get("booking_id"),
            reference=row.get("booking_reference"),
        )

    async def _simple_rpc(
        self,
        session: Session,
        name: str,
        params: dict[str, Any],
        default_error: str,
    ) -> LedgerResult:
        row = await self._rpc(session, name, params)
        if not row or not row.get("success"):
            return LedgerResult(
                success=False,
                error_message=(row or {}).get("error_message") or default_error,
            )
        return LedgerResult(success=True)

    async def cancel_booking(self, session: Session, booking_id: str) -> LedgerResult:
        return await self._simple_rpc(
            session, "cancel_booking", {"p_booking_id": booking_id}, "Cancel failed"
        )

    async def scan_booking(self, session: Session, qr_token: str) -> ScanResult:
        row = await self._rpc(session, "scan_booking", {"p_qr_code_data": qr_token})
        if not row:
            return ScanResult(success=False, error_message="Invalid QR code")
        booking_info = row.get("booking_info")
        return ScanResult(
            success=bool(row.get("success")),
            error_message=row.get("error_message"),
            booking_info=booking_info if isinstance(booking_info, dict) else None,
        )

    async def mark_booking_used(self, session: Session, booking_id: str) -> LedgerResult:
        return await self._simple_rpc(
            session, "mark_booking_used", {"p_booking_id": booking_id}, "Failed to mark as used"
        )

    async def admin_update_booking_status(
        self,
        session: Session,
        booking_id: str,
        new_status: str,
        notes: str | None = None,
    ) -> LedgerResult:
        params: dict[str, Any] = {"p_booking_id": booking_id, "p_new_status": new_status}
        if notes:
            params["p_notes"] = notes
        return await self._simple_rpc(
            session, "admin_update_booking_status", params, "Status update failed"
        )

    async def regenerate_qr_code(self, session: Session, booking_id: str) -> RegenerateQRResult:
        row = await self._rpc(session, "regenerate_qr_code", {"p_booking_id": booking_id})
        if not row or not row.get("success"):
            return RegenerateQRResult(
                success=False,
                error_message=(row or {}).get("error_message") or "QR regeneration failed",
            )
        return RegenerateQRResult(success=True, new_qr_code=row.get("new_qr_code"))

    # Reads

    async def list_yachts(self, session: Session | None = None, owner_id: str | None = None) -> list[dict]:
        params = {"select": "*", "order": "rating.desc"}
        if owner_id:
            params["owner_id"] = f"eq.{owner_id}"
        return await self._select("yachts", params, session)

    async def get_yacht(self, yacht_id: str, session: Session | None = None) -> dict | None:
        rows = await self._select("yachts", {"select": "*", "id": f"eq.{yacht_id}"}, session)
        return rows[0] if rows else None

    async def get_slots_remaining(
        self,
        yacht_id: str,
        booking_date: date,
        session: Session | None = None,
    ) -> int | None:
        rows = await self._select(
            "availability",
            {
                "select": "slots_remaining",
                "yacht_id": f"eq.{yacht_id}",
                "date": f"eq.{booking_date.isoformat()}",
            },
            session,
        )
        return rows[0]["slots_remaining"] if rows else None

    async def list_bookings(
        self,
        session: Session,
        user_id: str | None = None,
        yacht_ids: list[str] | None = None,
    ) -> list[dict]:
        params = {"select": BOOKING_SELECT, "order": "created_at.desc"}
        if user_id:
            params["user_id"] = f"eq.{user_id}"
        if yacht_ids is not None:
            if not yacht_ids:
                return []
            params["yacht_id"] = f"in.({','.join(yacht_ids)})"
        bookings = await self._select("bookings", params, session)
        return await self._attach_profiles(session, bookings)

    async def get_booking(self, session: Session, booking_id: str) -> dict | None:
        rows = await self._select(
            "bookings", {"select": BOOKING_SELECT, "id": f"eq.{booking_id}"}, session
        )
        rows = await self._attach_profiles(session, rows)
        return rows[0] if rows else None

    async def _attach_profiles(self, session: Session, bookings: list[dict]) -> list[dict]:
        """Embed guest profiles; bookings reference users, not profiles."""
        user_ids = sorted({b["user_id"] for b in bookings if b.get("user_id")})
        if not user_ids:
            return bookings
        profiles = await self._select(
            "profiles",
            {"select": "id,name,email,phone", "id": f"in.({','.join(user_ids)})"},
            session,
        )
        by_id = {p["id"]: p for p in profiles}
        return [{**b, "profile": by_id.get(b.get("user_id"))} for b in bookings]

    async def list_status_history(self, session: Session, booking_id: str) -> list[dict]:
        return await self._select(
            "booking_status_history",
            {"select": "*", "booking_id": f"eq.{booking_id}", "order": "created_at.asc"},
            session,
        )

    async def get_user_roles(self, session: Session) -> list[str]:
        rows = await self._select(
            "user_roles", {"select": "role", "user_id": f"eq.{session.user_id}"}, session
        )
        return [row["role"] for row in rows if row.get("role")]
