from django.db import migrations

from frontdesk import dbtriggers


class Migration(migrations.Migration):

    dependencies = [
        ('frontdesk', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(dbtriggers.install, dbtriggers.uninstall),
    ]
