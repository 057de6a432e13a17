"""
Management command to generate the general schedule of a cycle
Usage: python manage.py generate_schedule [--cycle 3]
"""

from django.core.management.base import BaseCommand, CommandError
from tabulate import tabulate

from apps.horarios.services.schedule_generator import ScheduleGenerator


class Command(BaseCommand):
    help = 'Generate the general schedule for a school cycle (latest cycle by default)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--cycle',
            type=int,
            help='Cycle id (default: most recent cycle)'
        )
        parser.add_argument(
            '--no-coalesce',
            action='store_true',
            help='Save one row per 30-minute slot instead of merged blocks'
        )

    def handle(self, *args, **options):
        cycle_id = options.get('cycle')
        self.stdout.write(self.style.WARNING(
            f"Generating general schedule for cycle: {cycle_id if cycle_id is not None else 'latest'}"
        ))

        generator = ScheduleGenerator(coalesce=False if options['no_coalesce'] else None)
        result = generator.generate(cycle_id)

        if not result['success']:
            raise CommandError(f"Failed to generate schedule: {result.get('error')}")

        self.stdout.write(self.style.SUCCESS(
            f"\n✅ Schedule generated for cycle {result['cycle_id']}"
        ))
        self.stdout.write(f"Total groups: {result['total_groups']}")
        self.stdout.write(f"Fully scheduled: {result['scheduled_groups']}")
        self.stdout.write(f"Schedule items: {result['scheduled_items']}")

        if result['shortfalls']:
            self.stdout.write(self.style.WARNING(f"\n⚠️ {len(result['shortfalls'])} groups under-scheduled:"))
            rows = [
                [s['group_id'], s['subject_id'], s['professor_id'],
                 s['required_slots'], s['assigned_slots'], s['missing_slots']]
                for s in result['shortfalls']
            ]
            self.stdout.write(tabulate(
                rows,
                headers=['Group', 'Subject', 'Professor', 'Required', 'Assigned', 'Missing'],
                tablefmt='grid'
            ))

        if result['skipped']:
            self.stdout.write(self.style.WARNING(f"\n⚠️ {len(result['skipped'])} groups skipped:"))
            self.stdout.write(tabulate(
                [[s['group_id'], s['reason']] for s in result['skipped']],
                headers=['Group', 'Reason'],
                tablefmt='grid'
            ))
