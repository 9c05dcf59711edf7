from django.db import migrations, models


def seed_sequence(apps, schema_editor):
    from modules.orders.codes import code_number

    Order = apps.get_model("orders", "Order")
    OrderCodeSequence = apps.get_model("orders", "OrderCodeSequence")
    highest = max(
        (code_number(code) for code in Order.objects.values_list("code", flat=True)),
        default=0,
    )
    OrderCodeSequence.objects.update_or_create(pk=1, defaults={"last_number": highest})


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrderCodeSequence",
            fields=[
                (
                    "id",
                    models.PositiveSmallIntegerField(
                        default=1, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("last_number", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "order_code_sequence",
            },
        ),
        migrations.RunPython(seed_sequence, migrations.RunPython.noop),
    ]
