import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import dental.models


ROLE_CHOICES = [
    ('admin', 'Administrator'),
    ('dentist', 'Dentist'),
    ('receptionist', 'Receptionist'),
    ('dental_assistant', 'Dental assistant'),
    ('technician', 'Technician'),
    ('radiologist', 'Radiologist'),
    ('finance_manager', 'Finance manager'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=ROLE_CHOICES, db_index=True, default='receptionist', max_length=20)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('specialization', models.CharField(blank=True, max_length=128)),
                ('license_number', models.CharField(blank=True, max_length=64)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='InviteCode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True)),
                ('role', models.CharField(choices=ROLE_CHOICES, max_length=20)),
                ('max_uses', models.PositiveIntegerField(default=1)),
                ('uses_count', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invite_codes', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('patient_id', models.CharField(max_length=20, unique=True)),
                ('name', models.CharField(db_index=True, max_length=255)),
                ('gender', models.CharField(blank=True, max_length=16)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('phone', models.CharField(blank=True, db_index=True, max_length=32)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('emergency_contact', models.CharField(blank=True, max_length=255)),
                ('emergency_phone', models.CharField(blank=True, max_length=32)),
                ('patient_type', models.CharField(choices=[('cash', 'cash'), ('insurance', 'insurance')], db_index=True, default='cash', max_length=16)),
                ('insurance', models.CharField(blank=True, max_length=32)),
                ('insurance_member_id', models.CharField(blank=True, max_length=64)),
                ('smart_patient_number', models.CharField(blank=True, max_length=64)),
                ('last_visit', models.DateField(blank=True, null=True)),
                ('next_appointment', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='MedicalRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('condition', models.CharField(max_length=255)),
                ('date', models.DateField()),
                ('description', models.TextField(blank=True)),
                ('doctor', models.CharField(blank=True, max_length=255)),
                ('treatment', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_records', to='dental.patient')),
            ],
        ),
        migrations.CreateModel(
            name='TreatmentNote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('doctor', models.CharField(max_length=255)),
                ('procedure', models.CharField(max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('follow_up', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='treatment_notes', to='dental.patient')),
            ],
        ),
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('patient_name', models.CharField(max_length=255)),
                ('patient_phone', models.CharField(blank=True, max_length=32)),
                ('patient_email', models.EmailField(blank=True, max_length=254)),
                ('date', models.DateField(db_index=True)),
                ('time', models.CharField(max_length=16)),
                ('treatment', models.CharField(default='General Consultation', max_length=255)),
                ('dentist', models.CharField(db_index=True, max_length=255)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Approved', 'Approved'), ('Confirmed', 'Confirmed'), ('Checked In', 'Checked In'), ('In Progress', 'In Progress'), ('Completed', 'Completed'), ('Cancelled', 'Cancelled')], db_index=True, default='Pending', max_length=16)),
                ('patient_type', models.CharField(blank=True, max_length=16)),
                ('insurance', models.CharField(blank=True, max_length=32)),
                ('insurance_member_id', models.CharField(blank=True, max_length=64)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments', to='dental.patient')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['date', 'dentist'], name='appt_date_dentist_idx'),
                    models.Index(fields=['patient', 'date'], name='appt_patient_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ScheduleNote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(db_index=True)),
                ('time_slot', models.CharField(max_length=32)),
                ('doctor_name', models.CharField(blank=True, max_length=255)),
                ('note', models.TextField()),
                ('type', models.CharField(default='note', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='Consultation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doctor_name', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('in-progress', 'in-progress'), ('waiting-xray', 'waiting-xray'), ('xray-done', 'xray-done'), ('completed', 'completed'), ('cancelled', 'cancelled')], db_index=True, default='in-progress', max_length=16)),
                ('symptoms', models.TextField(blank=True)),
                ('examination', models.TextField(blank=True)),
                ('vital_signs', models.JSONField(blank=True, default=dict)),
                ('diagnosis', models.TextField(blank=True)),
                ('diagnosis_type', models.CharField(blank=True, choices=[('clinical', 'clinical'), ('xray', 'xray')], max_length=16)),
                ('treatment_plan', models.TextField(blank=True)),
                ('prescriptions', models.TextField(blank=True)),
                ('follow_up_instructions', models.TextField(blank=True)),
                ('next_appointment', models.DateField(blank=True, null=True)),
                ('estimated_cost', models.PositiveIntegerField(blank=True, null=True)),
                ('discount_percent', models.PositiveSmallIntegerField(default=0)),
                ('treatment_items', models.JSONField(blank=True, default=list)),
                ('xray_result', models.JSONField(blank=True, null=True)),
                ('started_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='consultations', to='dental.appointment')),
                ('doctor', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='consultations', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='consultations', to='dental.patient')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['patient', 'started_at'], name='consult_patient_started_idx'),
                    models.Index(fields=['status', 'started_at'], name='consult_status_started_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='XRayImage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file', models.FileField(max_length=512, upload_to=dental.models._xray_upload)),
                ('content_type', models.CharField(blank=True, max_length=128)),
                ('size', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('consultation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='xray_images', to='dental.consultation')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='TreatmentPricing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('category', models.CharField(db_index=True, max_length=64)),
                ('base_price', models.PositiveIntegerField()),
                ('duration', models.PositiveIntegerField(default=30, help_text='minutes')),
                ('description', models.TextField(blank=True)),
                ('insurance_provider', models.CharField(blank=True, db_index=True, max_length=32)),
                ('is_active', models.BooleanField(default=True)),
                ('smart_item_code', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('patient_name', models.CharField(max_length=255)),
                ('treatment_name', models.CharField(max_length=255)),
                ('total_amount', models.PositiveIntegerField()),
                ('discount_percent', models.PositiveSmallIntegerField(default=0)),
                ('discount_amount', models.PositiveIntegerField(default=0)),
                ('final_total', models.PositiveIntegerField(default=0)),
                ('amount_paid', models.PositiveIntegerField(default=0)),
                ('payment_status', models.CharField(choices=[('pending', 'pending'), ('partial', 'partial'), ('paid', 'paid')], db_index=True, default='pending', max_length=16)),
                ('payment_method', models.CharField(choices=[('cash', 'cash'), ('card', 'card'), ('bank_transfer', 'bank_transfer'), ('insurance', 'insurance')], default='cash', max_length=16)),
                ('insurance_provider', models.CharField(blank=True, max_length=32)),
                ('collected_by', models.CharField(blank=True, max_length=255)),
                ('payment_date', models.DateField(blank=True, db_index=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to='dental.appointment')),
                ('consultation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='dental.consultation')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='dental.patient')),
            ],
        ),
        migrations.CreateModel(
            name='PaymentItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(max_length=255)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('unit_price', models.PositiveIntegerField()),
                ('total_price', models.PositiveIntegerField()),
                ('payment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='dental.payment')),
            ],
        ),
        migrations.CreateModel(
            name='InsuranceClaim',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('patient_name', models.CharField(max_length=255)),
                ('insurance_provider', models.CharField(max_length=32)),
                ('treatment_details', models.JSONField(default=dict)),
                ('patient_signature', models.TextField(blank=True)),
                ('claim_status', models.CharField(choices=[('draft', 'draft'), ('submitted', 'submitted'), ('approved', 'approved'), ('rejected', 'rejected'), ('paid', 'paid')], db_index=True, default='draft', max_length=16)),
                ('claim_number', models.CharField(blank=True, max_length=64)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='dental.appointment')),
                ('consultation', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='insurance_claim', to='dental.consultation')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='insurance_claims', to='dental.patient')),
            ],
        ),
        migrations.CreateModel(
            name='InventoryItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=255)),
                ('category', models.CharField(db_index=True, max_length=64)),
                ('current_stock', models.IntegerField(default=0)),
                ('unit', models.CharField(max_length=32)),
                ('reorder_level', models.IntegerField(default=0)),
                ('supplier', models.CharField(blank=True, max_length=255)),
                ('brand', models.CharField(blank=True, max_length=255)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(max_length=255)),
                ('type', models.CharField(choices=[('stock_in', 'stock_in'), ('stock_out', 'stock_out'), ('stock_take', 'stock_take')], max_length=16)),
                ('quantity', models.IntegerField()),
                ('remaining_stock', models.IntegerField()),
                ('performed_by', models.CharField(max_length=255)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('supplier', models.CharField(blank=True, max_length=255)),
                ('brand', models.CharField(blank=True, max_length=255)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('item', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='movements', to='dental.inventoryitem')),
            ],
            options={
                'indexes': [models.Index(fields=['item', 'created_at'], name='stockmove_item_created_idx')],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(default='info', max_length=32)),
                ('title', models.CharField(max_length=255)),
                ('message', models.TextField()),
                ('target_role', models.CharField(blank=True, max_length=20)),
                ('target_doctor_name', models.CharField(blank=True, max_length=255)),
                ('read', models.BooleanField(db_index=True, default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='dental.appointment')),
                ('target_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='EmailNotification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('recipient_email', models.EmailField(max_length=254)),
                ('subject', models.CharField(max_length=255)),
                ('email_type', models.CharField(max_length=32)),
                ('status', models.CharField(max_length=16)),
                ('error_message', models.TextField(blank=True)),
                ('sent_at', models.DateTimeField(auto_now_add=True)),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='dental.appointment')),
            ],
        ),
        migrations.CreateModel(
            name='InsurerToken',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('provider', models.CharField(choices=[('jubilee', 'Jubilee'), ('smart', 'SMART/GA')], max_length=16, unique=True)),
                ('access_token', models.TextField()),
                ('token_type', models.CharField(default='Bearer', max_length=32)),
                ('expires_at', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='JubileeVerification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('member_no', models.CharField(db_index=True, max_length=64)),
                ('verification_status', models.CharField(max_length=16)),
                ('authorization_no', models.CharField(blank=True, max_length=64)),
                ('daily_limit', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('benefits', models.JSONField(blank=True, default=list)),
                ('verification_response', models.JSONField(default=dict)),
                ('member_details', models.JSONField(default=dict)),
                ('verified_at', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name='JubileeItemVerification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('member_no', models.CharField(db_index=True, max_length=64)),
                ('benefit_code', models.CharField(max_length=32)),
                ('procedure_code', models.CharField(max_length=32)),
                ('items', models.JSONField(default=list)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('verification_status', models.CharField(blank=True, max_length=16)),
                ('verification_response', models.JSONField(default=dict)),
                ('verified_at', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name='JubileeSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('member_no', models.CharField(db_index=True, max_length=64)),
                ('authorization_no', models.CharField(max_length=64)),
                ('submission_type', models.CharField(choices=[('preauth', 'preauth'), ('claim', 'claim')], max_length=16)),
                ('bill_no', models.CharField(max_length=64)),
                ('folio_no', models.CharField(max_length=64)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('patient_data', models.JSONField(blank=True, default=dict)),
                ('doctor_data', models.JSONField(blank=True, default=dict)),
                ('treatments', models.JSONField(default=list)),
                ('submission_status', models.CharField(blank=True, max_length=16)),
                ('submission_id', models.CharField(blank=True, db_index=True, max_length=64)),
                ('submission_response', models.JSONField(default=dict)),
                ('current_status', models.CharField(blank=True, max_length=32)),
                ('status_response', models.JSONField(blank=True, null=True)),
                ('last_status_check', models.DateTimeField(blank=True, null=True)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='JubileePriceList',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('list_type', models.CharField(max_length=16, unique=True)),
                ('list_data', models.JSONField(default=dict)),
                ('last_updated', models.DateTimeField()),
            ],
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.CharField(blank=True, max_length=64, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
                ],
            },
        ),
    ]
