"""
Initial migration for Stockwatch models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockwatch models: Warehouse, AgingPolicy, StockBatch, EntryPhoto, StockMovement, Alert."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company', models.CharField(db_index=True, max_length=64, verbose_name='Empresa')),
                ('code', models.SlugField(help_text='Identificador único na empresa (ex: central, filial-sp)', verbose_name='Código')),
                ('name', models.CharField(max_length=100, verbose_name='Nome')),
                ('address', models.CharField(blank=True, default='', max_length=255, verbose_name='Endereço')),
                ('capacity', models.PositiveIntegerField(blank=True, help_text='Unidades. Vazio = sem limite.', null=True, verbose_name='Capacidade')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadados')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Armazém',
                'verbose_name_plural': 'Armazéns',
                'ordering': ['company', 'code'],
                'constraints': [
                    models.UniqueConstraint(fields=('company', 'code'), name='unique_warehouse_code_per_company'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AgingPolicy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company', models.CharField(max_length=64, unique=True, verbose_name='Empresa')),
                ('at_risk_threshold_days', models.PositiveIntegerField(default=60, verbose_name='Em risco a partir de (dias)')),
                ('dead_threshold_days', models.PositiveIntegerField(default=90, help_text='Deve ser maior que o limite de risco', verbose_name='Parado a partir de (dias)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Política de Envelhecimento',
                'verbose_name_plural': 'Políticas de Envelhecimento',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('dead_threshold_days__gt', models.F('at_risk_threshold_days'))), name='policy_dead_gt_at_risk'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company', models.CharField(db_index=True, max_length=64, verbose_name='Empresa')),
                ('batch_id', models.CharField(max_length=50, verbose_name='Código do Lote')),
                ('product_id', models.PositiveIntegerField(verbose_name='ID do Produto')),
                ('quantity_received', models.PositiveIntegerField(verbose_name='Quantidade Recebida')),
                ('quantity_available', models.PositiveIntegerField(verbose_name='Quantidade Disponível')),
                ('quantity_damaged', models.PositiveIntegerField(default=0, verbose_name='Quantidade Avariada')),
                ('entry_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data de Entrada')),
                ('expiry_date', models.DateField(blank=True, db_index=True, null=True, verbose_name='Data de Validade')),
                ('age_in_days', models.PositiveIntegerField(default=0, verbose_name='Idade (dias)')),
                ('status', models.CharField(choices=[('healthy', 'Saudável'), ('at_risk', 'Em risco'), ('dead', 'Parado')], db_index=True, default='healthy', max_length=20, verbose_name='Situação')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Criado por')),
                ('product_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to='contenttypes.contenttype', verbose_name='Tipo de Produto')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='stockwatch.warehouse', verbose_name='Armazém')),
            ],
            options={
                'verbose_name': 'Lote',
                'verbose_name_plural': 'Lotes',
                'ordering': ['entry_date'],
                'indexes': [
                    models.Index(fields=['product_type', 'product_id'], name='batch_product_idx'),
                    models.Index(fields=['company', 'status'], name='batch_company_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('warehouse', 'batch_id'), name='unique_batch_per_warehouse'),
                    models.CheckConstraint(condition=models.Q(('quantity_available__lte', models.F('quantity_received'))), name='batch_available_lte_received'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EntryPhoto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('url', models.URLField(max_length=500, verbose_name='URL')),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='entry_photos', to='stockwatch.stockbatch', verbose_name='Lote')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Enviado por')),
            ],
            options={
                'verbose_name': 'Foto de Entrada',
                'verbose_name_plural': 'Fotos de Entrada',
                'ordering': ['timestamp'],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('movement_type', models.CharField(choices=[('in', 'Entrada'), ('out', 'Saída'), ('transfer', 'Transferência'), ('damage', 'Avaria'), ('adjustment', 'Ajuste')], max_length=20, verbose_name='Tipo')),
                ('delta', models.IntegerField(help_text='Positivo = entrada, Negativo = saída', verbose_name='Variação')),
                ('reason', models.CharField(help_text='Obrigatório. Ex: "Venda para Cliente X", "Avaria no transporte"', max_length=255, verbose_name='Motivo')),
                ('photos', models.JSONField(blank=True, default=list, help_text='Lista de {"url": ..., "type": "entry|exit|damage"}', verbose_name='Fotos')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadados')),
                ('transport_details', models.JSONField(blank=True, default=dict, help_text='vehicle_number, driver_name, driver_phone, expected_delivery', verbose_name='Transporte')),
                ('transfer_status', models.CharField(blank=True, choices=[('in_transit', 'Em trânsito'), ('completed', 'Concluída')], default='', max_length=20, verbose_name='Status da Transferência')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Concluída em')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockwatch.stockbatch', verbose_name='Lote')),
                ('completed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Concluída por')),
                ('destination_batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='inbound_transfers', to='stockwatch.stockbatch', verbose_name='Lote de Destino')),
                ('destination_warehouse', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockwatch.warehouse', verbose_name='Armazém de Destino')),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
                ('source_warehouse', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockwatch.warehouse', verbose_name='Armazém de Origem')),
            ],
            options={
                'verbose_name': 'Movimento',
                'verbose_name_plural': 'Movimentos',
                'ordering': ['timestamp'],
                'indexes': [
                    models.Index(fields=['batch', 'timestamp'], name='movement_batch_ts_idx'),
                    models.Index(fields=['timestamp'], name='movement_ts_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Alert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company', models.CharField(db_index=True, max_length=64, verbose_name='Empresa')),
                ('product_id', models.PositiveIntegerField(verbose_name='ID do Produto')),
                ('kind', models.CharField(choices=[('dead_inventory', 'Estoque parado'), ('aging', 'Envelhecimento'), ('low_stock', 'Estoque baixo'), ('expiry_warning', 'Validade próxima')], max_length=20, verbose_name='Tipo')),
                ('severity', models.CharField(choices=[('critical', 'Crítico'), ('warning', 'Atenção'), ('info', 'Informativo')], max_length=10, verbose_name='Severidade')),
                ('title', models.CharField(max_length=200, verbose_name='Título')),
                ('message', models.TextField(verbose_name='Mensagem')),
                ('recommendation', models.TextField(verbose_name='Recomendação')),
                ('status', models.CharField(choices=[('open', 'Aberto'), ('acknowledged', 'Ciente'), ('dismissed', 'Descartado'), ('resolved', 'Resolvido')], db_index=True, default='open', max_length=20, verbose_name='Status')),
                ('acknowledged_at', models.DateTimeField(blank=True, null=True, verbose_name='Reconhecido em')),
                ('dismissed_at', models.DateTimeField(blank=True, null=True, verbose_name='Descartado em')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolvido em')),
                ('resolved_notes', models.TextField(blank=True, default='', verbose_name='Notas da resolução')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadados')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Atualizado em')),
                ('acknowledged_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Reconhecido por')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='alerts', to='stockwatch.stockbatch', verbose_name='Lote')),
                ('dismissed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Descartado por')),
                ('product_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to='contenttypes.contenttype', verbose_name='Tipo de Produto')),
                ('resolved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Resolvido por')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='alerts', to='stockwatch.warehouse', verbose_name='Armazém')),
            ],
            options={
                'verbose_name': 'Alerta',
                'verbose_name_plural': 'Alertas',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['company', 'status'], name='alert_company_status_idx'),
                    models.Index(fields=['kind', 'severity'], name='alert_kind_severity_idx'),
                    models.Index(fields=['-created_at'], name='alert_created_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['open', 'acknowledged'])), fields=('batch', 'kind'), name='unique_outstanding_alert_per_batch_kind'),
                ],
            },
        ),
    ]
