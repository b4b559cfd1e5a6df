# frontdesk/management/commands/init_clinic.py
from django.core.management.base import BaseCommand

from frontdesk.bootstrap import StartupConfig, initialize


class Command(BaseCommand):
    help = "Repair the patients schema and optionally seed sample data (idempotent)."

    def add_arguments(self, parser):
        seed = parser.add_mutually_exclusive_group()
        seed.add_argument('--seed', dest='seed', action='store_true', default=None,
                          help='Seed sample data regardless of SEED_SAMPLE_DATA.')
        seed.add_argument('--no-seed', dest='seed', action='store_false', default=None,
                          help='Never seed sample data.')
        parser.add_argument('--skip-repair', action='store_true',
                            help='Do not touch the photo column type.')

    def handle(self, *args, **opts):
        config = StartupConfig.from_settings(
            seed_sample_data=opts['seed'],
            repair_photo_column=False if opts['skip_repair'] else None,
        )
        report = initialize(config)
        if report.photo_column_repaired:
            self.stdout.write(self.style.SUCCESS("photo column converted to BYTEA"))
        if report.sample_patient_id:
            self.stdout.write(self.style.SUCCESS(f"sample patient created: {report.sample_patient_id}"))
        elif config.seed_sample_data:
            self.stdout.write("sample patient already present")
        for error in report.errors:
            self.stderr.write(self.style.ERROR(error))
        self.stdout.write(self.style.SUCCESS("Clinic initialised."))
