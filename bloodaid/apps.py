from django.apps import AppConfig


class BloodaidConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'bloodaid'
    verbose_name = 'BloodAid'
