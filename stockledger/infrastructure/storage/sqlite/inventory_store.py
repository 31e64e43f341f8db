"""SQLite implementation of inventory ledger storage."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.audit import AuditStatus, InventoryAudit, InventoryAuditItem
from stockledger.core.entities.catalog import Branch, Product
from stockledger.core.entities.documents import (
    DocumentStatus,
    InventoryAdjustment,
    PurchaseInvoice,
    PurchaseItem,
    Transformation,
    TransformationItem,
    WasteReason,
    WasteRecord,
)
from stockledger.core.entities.ledger import LedgerEntry, Movement, MovementKind, SourceType
from stockledger.core.exceptions import (
    ConcurrentModificationError,
    DuplicateAuditError,
    ValidationError,
)
from stockledger.core.interfaces.inventory_store import IInventorySession, IInventoryStore
from stockledger.infrastructure.storage.sqlite.catalog_store import (
    row_to_branch,
    row_to_product,
)
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from stockledger.infrastructure.storage.sqlite.rows import (
    date_filter,
    iso,
    parse_datetime,
)

logger = get_logger(__name__)

_DOCUMENT_TABLES = {
    SourceType.PURCHASE_INVOICE: "purchase_invoices",
    SourceType.TRANSFORMATION: "transformations",
    SourceType.WASTE_RECORD: "waste_records",
}


class SQLiteInventorySession(IInventorySession):
    """Ledger queries and writes bound to one pooled connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    # Catalog lookups

    async def get_product(self, product_id: int) -> Product | None:
        cursor = await self._conn.execute(
            "SELECT * FROM products WHERE id = ?", (product_id,)
        )
        row = await cursor.fetchone()
        return row_to_product(row) if row else None

    async def get_branch(self, branch_id: int) -> Branch | None:
        cursor = await self._conn.execute(
            "SELECT * FROM branches WHERE id = ?", (branch_id,)
        )
        row = await cursor.fetchone()
        return row_to_branch(row) if row else None

    # Ledger entries

    async def get_entry(self, product_id: int, branch_id: int) -> LedgerEntry | None:
        cursor = await self._conn.execute(
            "SELECT * FROM ledger_entries WHERE product_id = ? AND branch_id = ?",
            (product_id, branch_id),
        )
        row = await cursor.fetchone()
        return self._row_to_entry(row) if row else None

    async def insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        cursor = await self._conn.execute(
            """
            INSERT INTO ledger_entries (
                product_id, branch_id, quantity, average_cost, version,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.product_id,
                entry.branch_id,
                entry.quantity,
                entry.average_cost,
                entry.version,
                iso(entry.created_at),
                iso(entry.updated_at),
            ),
        )
        entry.id = cursor.lastrowid
        return entry

    async def update_entry(self, entry: LedgerEntry) -> LedgerEntry:
        cursor = await self._conn.execute(
            """
            UPDATE ledger_entries SET
                quantity = ?,
                average_cost = ?,
                version = version + 1,
                updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (
                entry.quantity,
                entry.average_cost,
                iso(entry.updated_at),
                entry.id,
                entry.version,
            ),
        )
        if cursor.rowcount == 0:
            logger.warning(
                "ledger_version_conflict",
                product_id=entry.product_id,
                branch_id=entry.branch_id,
                expected_version=entry.version,
            )
            raise ConcurrentModificationError(
                entry.product_id, entry.branch_id, entry.version
            )
        entry.version += 1
        return entry

    async def list_entries(
        self,
        branch_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerEntry]:
        query = "SELECT * FROM ledger_entries"
        params: list = []
        if branch_id is not None:
            query += " WHERE branch_id = ?"
            params.append(branch_id)
        query += " ORDER BY branch_id, product_id"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    # Movements

    async def add_movement(self, movement: Movement) -> Movement:
        cursor = await self._conn.execute(
            """
            INSERT INTO movements (
                product_id, branch_id, kind, quantity_delta, unit_cost,
                source_type, source_id, reversal_of, notes, actor_id, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.product_id,
                movement.branch_id,
                movement.kind.value,
                movement.quantity_delta,
                movement.unit_cost,
                movement.source_type.value if movement.source_type else None,
                movement.source_id,
                movement.reversal_of,
                movement.notes,
                movement.actor_id,
                iso(movement.created_at),
            ),
        )
        movement.id = cursor.lastrowid
        return movement

    async def get_movement(self, movement_id: int) -> Movement | None:
        cursor = await self._conn.execute(
            "SELECT * FROM movements WHERE id = ?", (movement_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_movement(row) if row else None

    async def list_movements(
        self,
        product_id: int | None = None,
        branch_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Movement]:
        query = "SELECT * FROM movements WHERE 1=1"
        params: list = []
        if product_id is not None:
            query += " AND product_id = ?"
            params.append(product_id)
        if branch_id is not None:
            query += " AND branch_id = ?"
            params.append(branch_id)
        query += " ORDER BY id"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    async def list_movements_for_source(
        self, source_type: SourceType, source_id: int
    ) -> list[Movement]:
        cursor = await self._conn.execute(
            """
            SELECT * FROM movements
            WHERE source_type = ? AND source_id = ?
            ORDER BY id
            """,
            (source_type.value, source_id),
        )
        rows = await cursor.fetchall()
        return [self._row_to_movement(row) for row in rows]

    async def mark_movement_reversed(self, movement_id: int, reversal_id: int) -> None:
        await self._conn.execute(
            "UPDATE movements SET reversed_by = ? WHERE id = ? AND reversed_by IS NULL",
            (reversal_id, movement_id),
        )

    # Purchase invoices

    async def add_purchase_invoice(self, invoice: PurchaseInvoice) -> PurchaseInvoice:
        try:
            cursor = await self._conn.execute(
                """
                INSERT INTO purchase_invoices (
                    invoice_number, supplier, branch_id, subtotal, vat_amount,
                    total_amount, status, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.invoice_number,
                    invoice.supplier,
                    invoice.branch_id,
                    invoice.subtotal,
                    invoice.vat_amount,
                    invoice.total_amount,
                    invoice.status.value,
                    invoice.created_by,
                    iso(invoice.created_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "invoice_number" in str(e):
                raise ValidationError(
                    "invoice_number", "invoice number already exists", invoice.invoice_number
                ) from e
            raise
        invoice.id = cursor.lastrowid

        for item in invoice.items:
            item.purchase_invoice_id = invoice.id
            item_cursor = await self._conn.execute(
                """
                INSERT INTO purchase_items (
                    purchase_invoice_id, product_id, quantity, unit_price,
                    vat_percentage, subtotal, vat_amount, total_price
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.purchase_invoice_id,
                    item.product_id,
                    item.quantity,
                    item.unit_price,
                    item.vat_percentage,
                    item.subtotal,
                    item.vat_amount,
                    item.total_price,
                ),
            )
            item.id = item_cursor.lastrowid
        return invoice

    async def get_purchase_invoice(self, invoice_id: int) -> PurchaseInvoice | None:
        cursor = await self._conn.execute(
            "SELECT * FROM purchase_invoices WHERE id = ?", (invoice_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        items = await self._purchase_items([invoice_id])
        return self._row_to_purchase_invoice(row, items.get(invoice_id, []))

    async def list_purchase_invoices(
        self,
        branch_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        include_voided: bool = False,
    ) -> list[PurchaseInvoice]:
        rows = await self._list_documents(
            "purchase_invoices", "created_at", branch_id, start, end, include_voided
        )
        items = await self._purchase_items([row["id"] for row in rows])
        return [self._row_to_purchase_invoice(row, items.get(row["id"], [])) for row in rows]

    async def _purchase_items(self, invoice_ids: list[int]) -> dict[int, list[PurchaseItem]]:
        if not invoice_ids:
            return {}
        placeholders = ",".join("?" for _ in invoice_ids)
        cursor = await self._conn.execute(
            f"""
            SELECT * FROM purchase_items
            WHERE purchase_invoice_id IN ({placeholders})
            ORDER BY id
            """,
            invoice_ids,
        )
        grouped: dict[int, list[PurchaseItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["purchase_invoice_id"], []).append(
                PurchaseItem(
                    id=row["id"],
                    purchase_invoice_id=row["purchase_invoice_id"],
                    product_id=row["product_id"],
                    quantity=float(row["quantity"]),
                    unit_price=float(row["unit_price"]),
                    vat_percentage=float(row["vat_percentage"]),
                )
            )
        return grouped

    # Transformations

    async def add_transformation(self, transformation: Transformation) -> Transformation:
        cursor = await self._conn.execute(
            """
            INSERT INTO transformations (
                branch_id, final_product_id, final_quantity, total_cost,
                unit_cost, notes, status, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transformation.branch_id,
                transformation.final_product_id,
                transformation.final_quantity,
                transformation.total_cost,
                transformation.unit_cost,
                transformation.notes,
                transformation.status.value,
                transformation.created_by,
                iso(transformation.created_at),
            ),
        )
        transformation.id = cursor.lastrowid

        for item in transformation.items:
            item.transformation_id = transformation.id
            item_cursor = await self._conn.execute(
                """
                INSERT INTO transformation_items (
                    transformation_id, raw_product_id, quantity,
                    cost_per_unit, total_cost
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    item.transformation_id,
                    item.raw_product_id,
                    item.quantity,
                    item.cost_per_unit,
                    item.total_cost,
                ),
            )
            item.id = item_cursor.lastrowid
        return transformation

    async def get_transformation(self, transformation_id: int) -> Transformation | None:
        cursor = await self._conn.execute(
            "SELECT * FROM transformations WHERE id = ?", (transformation_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        items = await self._transformation_items([transformation_id])
        return self._row_to_transformation(row, items.get(transformation_id, []))

    async def list_transformations(
        self,
        branch_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        include_voided: bool = False,
    ) -> list[Transformation]:
        rows = await self._list_documents(
            "transformations", "created_at", branch_id, start, end, include_voided
        )
        items = await self._transformation_items([row["id"] for row in rows])
        return [self._row_to_transformation(row, items.get(row["id"], [])) for row in rows]

    async def _transformation_items(
        self, transformation_ids: list[int]
    ) -> dict[int, list[TransformationItem]]:
        if not transformation_ids:
            return {}
        placeholders = ",".join("?" for _ in transformation_ids)
        cursor = await self._conn.execute(
            f"""
            SELECT * FROM transformation_items
            WHERE transformation_id IN ({placeholders})
            ORDER BY id
            """,
            transformation_ids,
        )
        grouped: dict[int, list[TransformationItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["transformation_id"], []).append(
                TransformationItem(
                    id=row["id"],
                    transformation_id=row["transformation_id"],
                    raw_product_id=row["raw_product_id"],
                    quantity=float(row["quantity"]),
                    cost_per_unit=float(row["cost_per_unit"]),
                )
            )
        return grouped

    # Waste records

    async def add_waste_record(self, record: WasteRecord) -> WasteRecord:
        cursor = await self._conn.execute(
            """
            INSERT INTO waste_records (
                branch_id, product_id, quantity, reason, cost, notes,
                status, recorded_by, recorded_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.branch_id,
                record.product_id,
                record.quantity,
                record.reason.value,
                record.cost,
                record.notes,
                record.status.value,
                record.recorded_by,
                iso(record.recorded_at),
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def get_waste_record(self, record_id: int) -> WasteRecord | None:
        cursor = await self._conn.execute(
            "SELECT * FROM waste_records WHERE id = ?", (record_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_waste_record(row) if row else None

    async def list_waste_records(
        self,
        branch_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        include_voided: bool = False,
    ) -> list[WasteRecord]:
        rows = await self._list_documents(
            "waste_records", "recorded_at", branch_id, start, end, include_voided
        )
        return [self._row_to_waste_record(row) for row in rows]

    async def void_document(
        self,
        source_type: SourceType,
        document_id: int,
        actor_id: str | None,
        voided_at: datetime,
    ) -> None:
        table = _DOCUMENT_TABLES[source_type]
        await self._conn.execute(
            f"""
            UPDATE {table} SET status = ?, voided_by = ?, voided_at = ?
            WHERE id = ? AND status = ?
            """,
            (
                DocumentStatus.VOIDED.value,
                actor_id,
                iso(voided_at),
                document_id,
                DocumentStatus.ACTIVE.value,
            ),
        )

    async def _list_documents(
        self,
        table: str,
        date_column: str,
        branch_id: int | None,
        start: date | None,
        end: date | None,
        include_voided: bool,
    ) -> list[aiosqlite.Row]:
        query = f"SELECT * FROM {table} WHERE 1=1"
        params: list = []
        if branch_id is not None:
            query += " AND branch_id = ?"
            params.append(branch_id)
        if not include_voided:
            query += " AND status = ?"
            params.append(DocumentStatus.ACTIVE.value)
        clause, date_params = date_filter(date_column, start, end)
        query += clause
        params.extend(date_params)
        query += f" ORDER BY {date_column} DESC, id DESC"

        cursor = await self._conn.execute(query, params)
        return list(await cursor.fetchall())

    # Adjustments

    async def add_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        cursor = await self._conn.execute(
            """
            INSERT INTO inventory_adjustments (
                branch_id, product_id, previous_quantity, new_quantity,
                reason, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                adjustment.branch_id,
                adjustment.product_id,
                adjustment.previous_quantity,
                adjustment.new_quantity,
                adjustment.reason,
                adjustment.created_by,
                iso(adjustment.created_at),
            ),
        )
        adjustment.id = cursor.lastrowid
        return adjustment

    # Audits

    async def add_audit(self, audit: InventoryAudit) -> InventoryAudit:
        try:
            cursor = await self._conn.execute(
                """
                INSERT INTO inventory_audits (
                    branch_id, audit_date, status, notes, created_by,
                    created_at, updated_by, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    audit.branch_id,
                    audit.audit_date.isoformat(),
                    audit.status.value,
                    audit.notes,
                    audit.created_by,
                    iso(audit.created_at),
                    audit.updated_by,
                    iso(audit.updated_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise
            raise DuplicateAuditError(audit.branch_id, audit.audit_date.isoformat()) from e
        audit.id = cursor.lastrowid
        return audit

    async def get_audit(self, audit_id: int) -> InventoryAudit | None:
        cursor = await self._conn.execute(
            "SELECT * FROM inventory_audits WHERE id = ?", (audit_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        audit = self._row_to_audit(row)

        cursor = await self._conn.execute(
            "SELECT * FROM inventory_audit_items WHERE audit_id = ? ORDER BY id",
            (audit_id,),
        )
        audit.items = [self._row_to_audit_item(r) for r in await cursor.fetchall()]
        return audit

    async def find_open_audit(
        self, branch_id: int, audit_date: date
    ) -> InventoryAudit | None:
        cursor = await self._conn.execute(
            """
            SELECT * FROM inventory_audits
            WHERE branch_id = ? AND audit_date = ? AND status != ?
            """,
            (branch_id, audit_date.isoformat(), AuditStatus.CANCELLED.value),
        )
        row = await cursor.fetchone()
        return self._row_to_audit(row) if row else None

    async def list_audits(
        self,
        branch_id: int | None = None,
        status: AuditStatus | None = None,
    ) -> list[InventoryAudit]:
        query = "SELECT * FROM inventory_audits WHERE 1=1"
        params: list = []
        if branch_id is not None:
            query += " AND branch_id = ?"
            params.append(branch_id)
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY audit_date DESC, id DESC"

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()
        return [self._row_to_audit(row) for row in rows]

    async def update_audit(self, audit: InventoryAudit) -> InventoryAudit:
        await self._conn.execute(
            """
            UPDATE inventory_audits SET
                status = ?,
                notes = ?,
                updated_by = ?,
                updated_at = ?,
                completed_by = ?,
                completed_at = ?
            WHERE id = ?
            """,
            (
                audit.status.value,
                audit.notes,
                audit.updated_by,
                iso(audit.updated_at),
                audit.completed_by,
                iso(audit.completed_at) if audit.completed_at else None,
                audit.id,
            ),
        )
        return audit

    async def add_audit_items(
        self, audit_id: int, items: list[InventoryAuditItem]
    ) -> list[InventoryAuditItem]:
        for item in items:
            item.audit_id = audit_id
            cursor = await self._conn.execute(
                """
                INSERT INTO inventory_audit_items (
                    audit_id, product_id, expected_quantity,
                    actual_quantity, difference, notes
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    audit_id,
                    item.product_id,
                    item.expected_quantity,
                    item.actual_quantity,
                    item.difference,
                    item.notes,
                ),
            )
            item.id = cursor.lastrowid
        return items

    async def get_audit_item(self, item_id: int) -> InventoryAuditItem | None:
        cursor = await self._conn.execute(
            "SELECT * FROM inventory_audit_items WHERE id = ?", (item_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_audit_item(row) if row else None

    async def update_audit_item(self, item: InventoryAuditItem) -> InventoryAuditItem:
        await self._conn.execute(
            """
            UPDATE inventory_audit_items SET
                actual_quantity = ?,
                difference = ?,
                notes = ?
            WHERE id = ?
            """,
            (item.actual_quantity, item.difference, item.notes, item.id),
        )
        return item

    # Row mapping

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> LedgerEntry:
        return LedgerEntry(
            id=row["id"],
            product_id=row["product_id"],
            branch_id=row["branch_id"],
            quantity=float(row["quantity"]),
            average_cost=float(row["average_cost"]),
            version=row["version"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> Movement:
        return Movement(
            id=row["id"],
            product_id=row["product_id"],
            branch_id=row["branch_id"],
            kind=MovementKind(row["kind"]),
            quantity_delta=float(row["quantity_delta"]),
            unit_cost=float(row["unit_cost"]),
            source_type=SourceType(row["source_type"]) if row["source_type"] else None,
            source_id=row["source_id"],
            reversal_of=row["reversal_of"],
            reversed_by=row["reversed_by"],
            notes=row["notes"],
            actor_id=row["actor_id"],
            created_at=parse_datetime(row["created_at"]),
        )

    @staticmethod
    def _row_to_purchase_invoice(
        row: aiosqlite.Row, items: list[PurchaseItem]
    ) -> PurchaseInvoice:
        return PurchaseInvoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            supplier=row["supplier"],
            branch_id=row["branch_id"],
            subtotal=float(row["subtotal"]),
            vat_amount=float(row["vat_amount"]),
            total_amount=float(row["total_amount"]),
            status=DocumentStatus(row["status"]),
            items=items,
            created_by=row["created_by"],
            created_at=parse_datetime(row["created_at"]),
            voided_by=row["voided_by"],
            voided_at=parse_datetime(row["voided_at"]) if row["voided_at"] else None,
        )

    @staticmethod
    def _row_to_transformation(
        row: aiosqlite.Row, items: list[TransformationItem]
    ) -> Transformation:
        return Transformation(
            id=row["id"],
            branch_id=row["branch_id"],
            final_product_id=row["final_product_id"],
            final_quantity=float(row["final_quantity"]),
            total_cost=float(row["total_cost"]),
            unit_cost=float(row["unit_cost"]),
            notes=row["notes"],
            status=DocumentStatus(row["status"]),
            items=items,
            created_by=row["created_by"],
            created_at=parse_datetime(row["created_at"]),
            voided_by=row["voided_by"],
            voided_at=parse_datetime(row["voided_at"]) if row["voided_at"] else None,
        )

    @staticmethod
    def _row_to_waste_record(row: aiosqlite.Row) -> WasteRecord:
        return WasteRecord(
            id=row["id"],
            branch_id=row["branch_id"],
            product_id=row["product_id"],
            quantity=float(row["quantity"]),
            reason=WasteReason(row["reason"]),
            cost=float(row["cost"]),
            notes=row["notes"],
            status=DocumentStatus(row["status"]),
            recorded_by=row["recorded_by"],
            recorded_at=parse_datetime(row["recorded_at"]),
            voided_by=row["voided_by"],
            voided_at=parse_datetime(row["voided_at"]) if row["voided_at"] else None,
        )

    @staticmethod
    def _row_to_audit(row: aiosqlite.Row) -> InventoryAudit:
        return InventoryAudit(
            id=row["id"],
            branch_id=row["branch_id"],
            audit_date=date.fromisoformat(row["audit_date"]),
            status=AuditStatus(row["status"]),
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=parse_datetime(row["created_at"]),
            updated_by=row["updated_by"],
            updated_at=parse_datetime(row["updated_at"]),
            completed_by=row["completed_by"],
            completed_at=parse_datetime(row["completed_at"]) if row["completed_at"] else None,
        )

    @staticmethod
    def _row_to_audit_item(row: aiosqlite.Row) -> InventoryAuditItem:
        actual = row["actual_quantity"]
        difference = row["difference"]
        return InventoryAuditItem(
            id=row["id"],
            audit_id=row["audit_id"],
            product_id=row["product_id"],
            expected_quantity=float(row["expected_quantity"]),
            actual_quantity=float(actual) if actual is not None else None,
            difference=float(difference) if difference is not None else None,
            notes=row["notes"],
        )


class SQLiteInventoryStore(IInventoryStore):
    """
    SQLite implementation of the inventory ledger store.

    ``transaction()`` runs under ``BEGIN IMMEDIATE``: SQLite admits one
    writer at a time, so a unit of work that reads a ledger entry and writes
    it back cannot interleave with another. The version check in
    ``update_entry`` still guards writers that bypass this store.
    """

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            self._pool = await get_pool()
        return self._pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLiteInventorySession]:
        pool = await self._get_pool()
        async with pool.transaction() as conn:
            yield SQLiteInventorySession(conn)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SQLiteInventorySession]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            yield SQLiteInventorySession(conn)
