"""
Integration tests for staff listings, doctor availability and shift
management.  Uses APITestCase with force_authenticate per role.
"""
from datetime import datetime
from unittest import mock

from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APITestCase

from clinical.models import Doctor, DoctorAvailability, DoctorShift, Nurse, NurseShift, User

# Monday 2024-01-01 22:30
MON_NIGHT = datetime(2024, 1, 1, 22, 30)


class ShiftAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.admin = User.objects.create_user(username='admin1', password='pass', role=User.ROLE_ADMIN)
        doc_user = User.objects.create_user(username='dr_house', password='pass', role=User.ROLE_DOCTOR,
                                            first_name='Gregory', last_name='House')
        self.doctor = Doctor.objects.create(user=doc_user, specialization='Diagnostics')
        nurse_user = User.objects.create_user(username='nurse_joy', password='pass', role=User.ROLE_NURSE)
        self.nurse = Nurse.objects.create(user=nurse_user, ward='Pediatrics')
        self.client.force_authenticate(user=self.admin)

    def test_create_and_list_doctor_shift(self):
        r = self.client.post('/api/shifts/doctors', {
            'doctorId': self.doctor.id, 'dayOfWeek': 1, 'startTime': '21:00', 'endTime': '05:00',
            'location': 'ER',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['status'], 'ACTIVE')
        self.assertTrue(r.data['data']['overnight'])

        r = self.client.get(f'/api/shifts/doctors/{self.doctor.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(len(r.data['data']), 1)
        self.assertEqual(r.data['data'][0]['location'], 'ER')

    def test_create_shift_for_missing_doctor_is_404(self):
        r = self.client.post('/api/shifts/doctors', {
            'doctorId': 999999, 'dayOfWeek': 1, 'startTime': '09:00', 'endTime': '17:00',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_shift_rejects_bad_times(self):
        for bad in ({'dayOfWeek': 7, 'startTime': '09:00', 'endTime': '17:00'},
                    {'dayOfWeek': 1, 'startTime': '9:00', 'endTime': '17:00'},
                    {'dayOfWeek': 1, 'startTime': '09:00', 'endTime': '24:00'}):
            r = self.client.post('/api/shifts/nurses', {'nurseId': self.nurse.id, **bad}, format='json')
            self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST, bad)
        self.assertFalse(NurseShift.objects.exists())

    def test_update_status_and_delete_nurse_shift(self):
        shift = NurseShift.objects.create(nurse=self.nurse, day_of_week=2, start_time='07:00', end_time='15:00')
        r = self.client.post(f'/api/shifts/nurses/{shift.id}/status', {'status': 'INACTIVE'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        shift.refresh_from_db()
        self.assertEqual(shift.status, 'INACTIVE')

        r = self.client.delete(f'/api/shifts/nurses/{shift.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(NurseShift.objects.filter(id=shift.id).exists())

        r = self.client.delete(f'/api/shifts/nurses/{shift.id}')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_doctor_shift(self):
        shift = DoctorShift.objects.create(doctor=self.doctor, day_of_week=3, start_time='09:00', end_time='17:00')
        r = self.client.delete(f'/api/shifts/doctors/{shift.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(DoctorShift.objects.exists())

    def test_status_of_missing_shift_is_404(self):
        r = self.client.post('/api/shifts/doctors/999999/status', {'status': 'ACTIVE'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_admin_cannot_manage_shifts(self):
        self.client.force_authenticate(user=self.nurse.user)
        r = self.client.post('/api/shifts/nurses', {
            'nurseId': self.nurse.id, 'dayOfWeek': 1, 'startTime': '07:00', 'endTime': '15:00',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(f'/api/shifts/nurses/{self.nurse.id}').status_code,
                         status.HTTP_403_FORBIDDEN)

    def test_replace_doctor_availability(self):
        DoctorAvailability.objects.create(doctor=self.doctor, day_of_week=5, start_time='08:00', end_time='12:00')
        url = f'/api/doctors/{self.doctor.id}/availability'
        r = self.client.put(url, {'availability': [
            {'dayOfWeek': 1, 'startTime': '21:00', 'endTime': '05:00'},
            {'dayOfWeek': 3, 'startTime': '09:00', 'endTime': '17:00', 'isAvailable': False},
        ]}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([w['dayOfWeek'] for w in r.data['data']], [1, 3])
        self.assertFalse(DoctorAvailability.objects.filter(day_of_week=5).exists())

        r = self.client.get(url)
        self.assertEqual(r.data['data'][0]['isAvailable'], True)
        self.assertEqual(r.data['data'][1]['isAvailable'], False)

    def test_availability_accepts_bare_list(self):
        r = self.client.put(f'/api/doctors/{self.doctor.id}/availability',
                            [{'dayOfWeek': 0, 'startTime': '10:00', 'endTime': '14:00'}], format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(self.doctor.availability.count(), 1)

    def test_invalid_availability_keeps_existing_windows(self):
        DoctorAvailability.objects.create(doctor=self.doctor, day_of_week=5, start_time='08:00', end_time='12:00')
        r = self.client.put(f'/api/doctors/{self.doctor.id}/availability',
                            [{'dayOfWeek': 9, 'startTime': '10:00', 'endTime': '14:00'}], format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.doctor.availability.count(), 1)

    def test_availability_is_read_only_for_non_admins(self):
        self.client.force_authenticate(user=self.doctor.user)
        url = f'/api/doctors/{self.doctor.id}/availability'
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)
        r = self.client.put(url, [], format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_availability_of_missing_doctor_is_404(self):
        self.assertEqual(self.client.get('/api/doctors/999999/availability').status_code,
                         status.HTTP_404_NOT_FOUND)


class StaffListTests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        viewer = User.objects.create_user(username='viewer', password='pass', role=User.ROLE_NURSE)
        self.client.force_authenticate(user=viewer)

        night = Doctor.objects.create(
            user=User.objects.create_user(username='night', password='x', role=User.ROLE_DOCTOR),
            specialization='Emergency')
        DoctorAvailability.objects.create(doctor=night, day_of_week=1, start_time='21:00', end_time='05:00')
        day = Doctor.objects.create(
            user=User.objects.create_user(username='day', password='x', role=User.ROLE_DOCTOR),
            specialization='Cardiology')
        DoctorAvailability.objects.create(doctor=day, day_of_week=1, start_time='09:00', end_time='17:00')
        self.night, self.day = night, day

        ward_nurse = Nurse.objects.create(
            user=User.objects.create_user(username='ward', password='x', role=User.ROLE_NURSE), ward='ICU')
        NurseShift.objects.create(nurse=ward_nurse, day_of_week=1, start_time='20:00', end_time='08:00')
        self.ward_nurse = ward_nurse

    def get(self, url, params=None):
        with mock.patch('clinical.services.staff.timezone') as tz:
            tz.localtime.return_value = MON_NIGHT
            return self.client.get(url, params or {})

    def test_doctor_badges(self):
        r = self.get('/api/doctors')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        badges = {d['id']: d['onShift'] for d in r.data['data']}
        self.assertEqual(badges, {self.night.id: True, self.day.id: False})

    def test_on_shift_filter(self):
        r = self.get('/api/doctors', {'onShift': '1'})
        self.assertEqual([d['id'] for d in r.data['data']], [self.night.id])
        self.assertEqual(r.data['pagination']['total'], 1)

        r = self.get('/api/doctors', {'onShift': '0'})
        self.assertEqual([d['id'] for d in r.data['data']], [self.day.id])

    def test_search_and_pagination(self):
        r = self.get('/api/doctors', {'q': 'cardio'})
        self.assertEqual([d['id'] for d in r.data['data']], [self.day.id])

        r = self.get('/api/doctors', {'page': 2, 'pageSize': 1})
        self.assertEqual([d['id'] for d in r.data['data']], [self.day.id])
        self.assertEqual(r.data['pagination'], {'total': 2, 'page': 2, 'pageSize': 1})

    def test_nurse_list(self):
        r = self.get('/api/nurses', {'onShift': '1'})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([n['id'] for n in r.data['data']], [self.ward_nurse.id])
        self.assertEqual(r.data['data'][0]['shifts'][0]['overnight'], True)
