from django.apps import AppConfig


class EggProductionConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'egg_production'
    verbose_name = 'Egg Production'
