"""
Create or update the default credit plans.

Usage:
    python manage.py seed_plans
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from payments.models import Plan, PlanType

DEFAULT_PLANS = [
    {
        "type": PlanType.BASIC,
        "name": "Plano Básico",
        "price": Decimal("29.90"),
        "credits": 1000,
        "description": "Relatório com MBTI + 1 celeb lookalike + 2 dicas de conversa",
        "features": [
            "Análise MBTI completa",
            "1 celebridade lookalike",
            "2 dicas de conversa personalizadas",
        ],
        "sort_order": 1,
        "discount": 0,
    },
    {
        "type": PlanType.COMPLETE,
        "name": "Plano Completo",
        "price": Decimal("59.90"),
        "credits": 3000,
        "description": (
            "Relatório full com múltiplas celebs variadas + scores preditivos "
            "+ 3 scripts personalizados + infográfico PDF"
        ),
        "features": [
            "Análise MBTI completa",
            "Múltiplas celebridades variadas",
            "Scores preditivos de compatibilidade",
            "3 scripts de conversa personalizados",
            "Infográfico PDF compartilhável",
        ],
        "sort_order": 2,
        "discount": 0,
    },
    {
        "type": PlanType.CREDITS_PACK,
        "name": "Pacote de Créditos",
        "price": Decimal("99.00"),
        "credits": 5000,
        "description": (
            "5000 créditos por R$99 (desconto 20% - ideal para análises "
            "recorrentes ou de casal)"
        ),
        "features": [
            "5000 créditos para análises",
            "Desconto de 20%",
            "Ideal para casais",
            "Análises recorrentes",
        ],
        "sort_order": 3,
        "discount": 20,
    },
]


class Command(BaseCommand):
    help = "Create or update the default credit plans."

    @transaction.atomic
    def handle(self, *args, **options):
        for data in DEFAULT_PLANS:
            defaults = {key: value for key, value in data.items() if key != "type"}
            plan, created = Plan.objects.update_or_create(
                type=data["type"],
                defaults={**defaults, "is_active": True},
            )
            verb = "Created" if created else "Updated"
            self.stdout.write(f"{verb} {plan}")

        self.stdout.write(
            self.style.SUCCESS(f"{len(DEFAULT_PLANS)} plans are available.")
        )
