import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('patient_id', models.CharField(max_length=20, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('surname', models.CharField(max_length=255)),
                ('father_name', models.CharField(blank=True, max_length=255, null=True)),
                ('gender', models.CharField(blank=True, max_length=20, null=True)),
                ('age', models.IntegerField(blank=True, default=0, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('blood_group', models.CharField(blank=True, max_length=10, null=True)),
                ('phone_number', models.CharField(blank=True, max_length=20, null=True)),
                ('aadhar_number', models.CharField(max_length=20, unique=True)),
                ('photo', models.BinaryField(blank=True, editable=True, null=True)),
                ('total_visits', models.IntegerField(default=0, null=True)),
                ('op_no', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('reg_no', models.CharField(blank=True, max_length=50, null=True, unique=True)),
            ],
            options={
                'db_table': 'patients',
                'ordering': ['patient_id'],
            },
        ),
        migrations.CreateModel(
            name='Nurse',
            fields=[
                ('nurse_id', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('name', models.CharField(blank=True, max_length=100, null=True)),
                ('email', models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ('password', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(blank=True, null=True)),
                ('role', models.CharField(blank=True, max_length=50, null=True)),
                ('status', models.CharField(blank=True, max_length=20, null=True)),
            ],
            options={
                'db_table': 'nurse',
                'ordering': ['nurse_id'],
            },
        ),
        migrations.CreateModel(
            name='Visit',
            fields=[
                ('visit_id', models.BigAutoField(primary_key=True, serialize=False)),
                ('visit_date', models.DateTimeField(blank=True, null=True)),
                ('bp', models.CharField(blank=True, max_length=50, null=True)),
                ('complaint', models.TextField(blank=True, null=True)),
                ('symptoms', models.TextField(blank=True, null=True)),
                ('op_no', models.CharField(blank=True, max_length=50, null=True)),
                ('reg_no', models.CharField(blank=True, max_length=50, null=True)),
                ('status', models.CharField(blank=True, max_length=50, null=True)),
                ('temperature', models.CharField(blank=True, max_length=50, null=True)),
                ('weight', models.CharField(blank=True, max_length=50, null=True)),
                ('prescription', models.TextField(blank=True, null=True)),
                ('patient', models.ForeignKey(db_column='patient_id', on_delete=django.db.models.deletion.CASCADE, related_name='visits', to='frontdesk.patient')),
            ],
            options={
                'db_table': 'visits',
                'ordering': ['visit_id'],
            },
        ),
        migrations.CreateModel(
            name='LabTest',
            fields=[
                ('test_id', models.BigAutoField(primary_key=True, serialize=False)),
                ('test_name', models.CharField(blank=True, max_length=255, null=True)),
                ('result', models.TextField(blank=True, null=True)),
                ('reference_range', models.CharField(blank=True, max_length=255, null=True)),
                ('status', models.CharField(blank=True, default='Pending', max_length=255, null=True)),
                ('test_given_at', models.DateTimeField(blank=True, null=True)),
                ('result_updated_at', models.DateTimeField(blank=True, null=True)),
                ('patient', models.ForeignKey(db_column='patient_id', on_delete=django.db.models.deletion.CASCADE, related_name='lab_tests', to='frontdesk.patient')),
                ('visit', models.ForeignKey(blank=True, db_column='visit_id', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='lab_tests', to='frontdesk.visit')),
            ],
            options={
                'db_table': 'labtests',
                'ordering': ['test_id'],
            },
        ),
    ]
