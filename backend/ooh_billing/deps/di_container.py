"""
Dependency injection container using dependency-injector.
Wires services and controllers.
"""

from dependency_injector import containers, providers

from ooh_billing.services.health_service import HealthService
from ooh_billing.services.line_item_service import LineItemService
from ooh_billing.services.bulk_pricing_service import BulkPricingService
from ooh_billing.services.totals_service import TotalsService
from ooh_billing.services.excel_export_service import ExcelExportService
from ooh_billing.controllers.health_controller import HealthController
from ooh_billing.controllers.pricing_controller import PricingController
from ooh_billing.controllers.line_item_controller import LineItemController
from ooh_billing.controllers.document_controller import DocumentController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # Services
    health_service = providers.Singleton(
        HealthService,
    )

    line_item_service = providers.Singleton(
        LineItemService,
    )

    bulk_pricing_service = providers.Singleton(
        BulkPricingService,
        line_item_service=line_item_service,
    )

    totals_service = providers.Singleton(
        TotalsService,
        line_item_service=line_item_service,
    )

    excel_export_service = providers.Singleton(
        ExcelExportService,
        line_item_service=line_item_service,
        totals_service=totals_service,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )

    pricing_controller = providers.Factory(
        PricingController,
    )

    line_item_controller = providers.Factory(
        LineItemController,
        line_item_service=line_item_service,
        bulk_pricing_service=bulk_pricing_service,
    )

    document_controller = providers.Factory(
        DocumentController,
        totals_service=totals_service,
        excel_export_service=excel_export_service,
    )


# Global container instance
_container: Container = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = Container()
    return _container
