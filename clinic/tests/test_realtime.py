import pytest
from asgiref.sync import async_to_sync, sync_to_async
from channels.testing import WebsocketCommunicator

from clinic.authentication import issue_token
from clinic.services import realtime
from hms.asgi import application

pytestmark = pytest.mark.django_db(transaction=True)


def test_anonymous_socket_is_closed(patient):
    async def scenario():
        communicator = WebsocketCommunicator(application, '/ws/notifications/')
        connected, code = await communicator.connect()
        assert not connected
        assert code == 4001

    async_to_sync(scenario)()


def test_bad_token_is_treated_as_anonymous():
    async def scenario():
        communicator = WebsocketCommunicator(application, '/ws/notifications/?token=not-a-jwt')
        connected, code = await communicator.connect()
        assert not connected
        assert code == 4001

    async_to_sync(scenario)()


def test_authenticated_socket_gets_pushes(doctor):
    token = issue_token(doctor)

    async def scenario():
        communicator = WebsocketCommunicator(application, f'/ws/notifications/?token={token}')
        connected, _ = await communicator.connect()
        assert connected
        hello = await communicator.receive_json_from()
        assert hello == {'event': 'connected', 'data': {'userId': doctor.id, 'role': 'Doctor'}}

        await communicator.send_json_to({'type': 'ping'})
        assert await communicator.receive_json_from() == {'event': 'pong', 'data': {}}

        await communicator.send_to(text_data='{broken')
        assert (await communicator.receive_json_from())['event'] == 'error'

        await sync_to_async(realtime.emit_to_user)(doctor.id, 'new_notification', {'title': 'Hi'})
        assert await communicator.receive_json_from() == {'event': 'new_notification', 'data': {'title': 'Hi'}}

        await sync_to_async(realtime.emit_to_role)('Doctor', 'medicine_updated', {'medicineIds': [1]})
        assert (await communicator.receive_json_from())['event'] == 'medicine_updated'

        await sync_to_async(realtime.broadcast)('announcement', {'text': 'Fire drill at noon'})
        assert (await communicator.receive_json_from())['data'] == {'text': 'Fire drill at noon'}

        await communicator.disconnect()

    async_to_sync(scenario)()


def test_cookie_authenticates_socket(patient):
    token = issue_token(patient)

    async def scenario():
        communicator = WebsocketCommunicator(application, '/ws/notifications/',
                                             headers=[(b'cookie', f'jwt={token}'.encode())])
        connected, _ = await communicator.connect()
        assert connected
        assert (await communicator.receive_json_from())['data']['userId'] == patient.id
        await communicator.disconnect()

    async_to_sync(scenario)()
