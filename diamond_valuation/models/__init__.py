# Importing every model registers it on Base.metadata.
from diamond_valuation.models.user import User
from diamond_valuation.models.service_offering import ServiceOffering
from diamond_valuation.models.receipt import Receipt
from diamond_valuation.models.valuation_record import ValuationRecord
from diamond_valuation.models.audit_log import AuditLogRecord
