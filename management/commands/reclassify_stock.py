"""
Management command to reclassify stock batches by age.

Usage:
    python manage.py reclassify_stock
    python manage.py reclassify_stock --dry-run
    python manage.py reclassify_stock --expiry
"""

from django.core.management.base import BaseCommand

from stockwatch import stock


class Command(BaseCommand):
    """Reclassify batches and emit aging alerts."""

    help = 'Recalcula idade e situação dos lotes e gera alertas'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Mostra quantos lotes seriam atualizados sem executar'
        )
        parser.add_argument(
            '--expiry',
            action='store_true',
            help='Também gera alertas de validade próxima'
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            pending = stock.pending_reclassification()
            self.stdout.write(f'{pending} lote(s) seria(m) atualizado(s)')
            return

        result = stock.reclassify()
        self.stdout.write(
            self.style.SUCCESS(
                f'{result.total_processed} lote(s) processado(s), '
                f'{result.updated} atualizado(s), '
                f'{result.alerts_generated} alerta(s) gerado(s)'
            )
        )
        for failure in result.failed:
            self.stderr.write(f"Falha no lote {failure['batchId']}: {failure['error']}")

        if options['expiry']:
            alerts = stock.check_expiring()
            self.stdout.write(
                self.style.SUCCESS(f'{len(alerts)} alerta(s) de validade gerado(s)')
            )
