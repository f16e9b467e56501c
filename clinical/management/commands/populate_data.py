"""
Management command to populate the database with demo data.
"""
import random
from datetime import date

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from clinical.models import (
    Doctor, DoctorAvailability, DoctorShift, Nurse, NurseShift, Patient, PatientState, User,
)
from clinical.services import patient_states
from clinical.services.audit import NullRecorder


class Command(BaseCommand):
    help = 'Populate database with demo staff, schedules and patients'

    def handle(self, *args, **options):
        self.stdout.write('Creating demo data...')

        doctors = self.create_doctors()
        self.create_doctor_availability(doctors)
        self.create_doctor_shifts(doctors)

        nurses = self.create_nurses()
        self.create_nurse_shifts(nurses)

        patients = self.create_patients()
        self.move_patients(patients)

        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_user(self, username, role, first_name, last_name):
        user, _ = User.objects.get_or_create(
            username=username,
            defaults={
                'email': f'{username}@clinicboard.local',
                'password': make_password('123456'),
                'role': role,
                'first_name': first_name,
                'last_name': last_name,
            }
        )
        return user

    def create_doctors(self):
        doctors_data = [
            {'username': 'dr_house', 'first_name': 'Gregory', 'last_name': 'House',
             'specialization': 'Diagnostics', 'department': 'Internal Medicine'},
            {'username': 'dr_grey', 'first_name': 'Meredith', 'last_name': 'Grey',
             'specialization': 'General Surgery', 'department': 'Surgery'},
            {'username': 'dr_carter', 'first_name': 'John', 'last_name': 'Carter',
             'specialization': 'Emergency Medicine', 'department': 'Emergency'},
        ]

        doctors = []
        for data in doctors_data:
            user = self.create_user(data['username'], User.ROLE_DOCTOR, data['first_name'], data['last_name'])
            doctor, _ = Doctor.objects.get_or_create(
                user=user,
                defaults={'specialization': data['specialization'], 'department': data['department']},
            )
            doctors.append(doctor)
            self.stdout.write(f'Doctor: {user.get_full_name()}')
        return doctors

    def create_doctor_availability(self, doctors):
        # weekday office hours for the first two, overnight emergency cover for the last
        for doctor in doctors[:2]:
            for day in range(1, 6):
                DoctorAvailability.objects.get_or_create(
                    doctor=doctor, day_of_week=day, start_time='09:00', end_time='17:00',
                )
        for day in range(7):
            DoctorAvailability.objects.get_or_create(
                doctor=doctors[-1], day_of_week=day, start_time='21:00', end_time='05:00',
            )
        self.stdout.write(f'Availability for {len(doctors)} doctors')

    def create_doctor_shifts(self, doctors):
        for doctor in doctors:
            day = random.randint(0, 6)
            DoctorShift.objects.get_or_create(
                doctor=doctor, day_of_week=day, start_time='08:00', end_time='20:00',
                defaults={'location': doctor.department},
            )
            self.stdout.write(f'Doctor shift: {doctor.user.username} day {day}')

    def create_nurses(self):
        nurses_data = [
            {'username': 'nurse_joy', 'first_name': 'Joy', 'last_name': 'Adams', 'ward': 'Pediatrics'},
            {'username': 'nurse_ratched', 'first_name': 'Mildred', 'last_name': 'Ratched', 'ward': 'Psychiatry'},
            {'username': 'nurse_hathaway', 'first_name': 'Carol', 'last_name': 'Hathaway', 'ward': 'Emergency'},
        ]

        nurses = []
        for data in nurses_data:
            user = self.create_user(data['username'], User.ROLE_NURSE, data['first_name'], data['last_name'])
            nurse, _ = Nurse.objects.get_or_create(user=user, defaults={'ward': data['ward']})
            nurses.append(nurse)
            self.stdout.write(f'Nurse: {user.get_full_name()}')
        return nurses

    def create_nurse_shifts(self, nurses):
        blocks = [('07:00', '15:00'), ('15:00', '23:00'), ('23:00', '07:00')]
        for i, nurse in enumerate(nurses):
            start, end = blocks[i % len(blocks)]
            for day in range(7):
                NurseShift.objects.get_or_create(
                    nurse=nurse, day_of_week=day, start_time=start, end_time=end,
                    defaults={'ward': nurse.ward},
                )
            self.stdout.write(f'Nurse shifts: {nurse.user.username} {start}-{end}')

    def create_patients(self):
        names = ['Alice Moore', 'Bob Young', 'Carla Diaz', 'Dan Brooks', 'Eve Turner', 'Frank Hill']
        blood_types = ['A+', 'A-', 'B+', 'O+', 'O-', 'AB+']

        patients = []
        for i, name in enumerate(names):
            patient, _ = Patient.objects.get_or_create(
                name=name,
                defaults={
                    'gender': 'F' if i % 2 == 0 else 'M',
                    'date_of_birth': date(1950 + random.randint(0, 50), random.randint(1, 12), random.randint(1, 28)),
                    'phone': f'555{random.randint(1000000, 9999999)}',
                    'blood_type': random.choice(blood_types),
                }
            )
            patients.append(patient)
            self.stdout.write(f'Patient: {patient.name}')
        return patients

    def move_patients(self, patients):
        paths = [
            [],
            [PatientState.IN_APPOINTMENT],
            [PatientState.IN_APPOINTMENT, PatientState.IN_OPERATION],
            [PatientState.ADMITTED, PatientState.IN_WARD],
            [PatientState.ADMITTED, PatientState.IN_WARD, PatientState.DISCHARGED],
            [PatientState.IN_APPOINTMENT, PatientState.DISCHARGED],
        ]
        for patient, path in zip(patients, paths):
            if patient.state_logs.exists():
                continue
            for state in path:
                patient_states.transition(patient.id, state, 'demo data', recorder=NullRecorder())
            self.stdout.write(f'Patient {patient.name} -> {path[-1] if path else patient.current_state}')
