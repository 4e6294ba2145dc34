"""
Tests for the local JSON API (Flask test client).
"""

import io
import time

import pytest

from imagefinder import ImageFinder
from imagefinder.app import create_app
from imagefinder.api import STATE_KEY
from imagefinder.api.orchestrator import IndexJob
from imagefinder.errors import EnumerationError, StorageError
from imagefinder.models import IndexProgress, IndexResult
from imagefinder.state import IndexState


@pytest.fixture
def finder(file_store):
    return ImageFinder(store=file_store)


@pytest.fixture
def app(finder):
    app = create_app(finder)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def indexed(finder, many_images):
    finder.index_folder(many_images)
    return many_images


def wait_for_idle(client, timeout=15.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        status = client.get('/api/status').get_json()
        if status['status'] != 'indexing':
            return status
        time.sleep(0.05)
    raise AssertionError('indexing did not finish')


class TestBasicRoutes:
    """Test read-only endpoints."""

    def test_ping(self, client):
        response = client.get('/api/ping')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'

    def test_roots(self, client, indexed):
        data = client.get('/api/roots').get_json()
        assert data['roots'] == [{'path': str(indexed), 'count': 10}]

    def test_stats(self, client, indexed):
        data = client.get('/api/stats').get_json()
        assert data['total_records'] == 10
        assert data['root_count'] == 1

    def test_status_idle(self, client):
        data = client.get('/api/status').get_json()
        assert data['status'] == 'idle'
        assert data['eta_seconds'] is None


class TestIndexRoute:
    """Test background indexing through the API."""

    def test_index_runs_in_background(self, client, image_dir):
        response = client.post('/api/index', json={'directory': str(image_dir)})
        assert response.status_code == 202

        status = wait_for_idle(client)
        assert status['status'] == 'complete'
        assert status['result']['indexed'] == 3
        assert status['result']['total'] == 4
        assert status['message'] == 'Indexed 3 of 4 images (1 could not be read)'

        roots = client.get('/api/roots').get_json()['roots']
        assert roots == [{'path': str(image_dir), 'count': 3}]

    def test_missing_body(self, client):
        assert client.post('/api/index').status_code == 400

    def test_relative_directory(self, client):
        response = client.post('/api/index', json={'directory': 'photos'})
        assert response.status_code == 400
        assert 'absolute' in response.get_json()['error']

    def test_missing_directory(self, client, temp_dir):
        response = client.post('/api/index', json={'directory': str(temp_dir / 'missing')})
        assert response.status_code == 400

    def test_invalid_workers(self, client, many_images):
        response = client.post('/api/index', json={'directory': str(many_images), 'workers': 0})
        assert response.status_code == 400

    def test_busy(self, client, finder, many_images):
        finder._run_lock.acquire()
        try:
            response = client.post('/api/index', json={'directory': str(many_images)})
        finally:
            finder._run_lock.release()
        assert response.status_code == 409

    def test_already_indexing(self, client, app, many_images):
        app.extensions[STATE_KEY].begin('/elsewhere')
        response = client.post('/api/index', json={'directory': str(many_images)})
        assert response.status_code == 409

    def test_cancel_when_idle(self, client):
        assert client.post('/api/cancel').get_json()['status'] == 'no_index_running'

    def test_cancel_running(self, client, app):
        app.extensions[STATE_KEY].begin('/elsewhere')
        assert client.post('/api/cancel').get_json()['status'] == 'cancel_requested'
        assert client.get('/api/status').get_json()['cancel_requested'] is True


class TestSearchRoute:
    """Test /api/search."""

    def test_multipart_upload(self, client, indexed):
        query = indexed / 'img_02.png'
        response = client.post(
            '/api/search',
            data={'image': (io.BytesIO(query.read_bytes()), 'query.png')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 200
        data = response.get_json()
        assert data['count'] == 10
        assert data['matches'][0]['path'] == str(query)
        assert data['matches'][0]['distance'] == 0

    def test_raw_body(self, client, indexed):
        query = indexed / 'img_04.png'
        response = client.post('/api/search', data=query.read_bytes(), content_type='application/octet-stream')
        assert response.status_code == 200
        assert response.get_json()['matches'][0]['path'] == str(query)

    def test_no_image(self, client):
        assert client.post('/api/search').status_code == 400

    def test_undecodable_image(self, client):
        response = client.post('/api/search', data=b'garbage', content_type='application/octet-stream')
        assert response.status_code == 422
        assert 'error' in response.get_json()


class TestImageRoute:
    """Test /api/image."""

    def test_serves_indexed_file(self, client, indexed):
        path = indexed / 'img_00.png'
        response = client.get('/api/image', query_string={'path': str(path)})
        assert response.status_code == 200
        assert response.data == path.read_bytes()
        response.close()

    def test_rejects_unindexed_file(self, client, temp_dir):
        secret = temp_dir / 'secret.txt'
        secret.write_text('secret')
        response = client.get('/api/image', query_string={'path': str(secret)})
        assert response.status_code == 404

    def test_missing_path(self, client):
        assert client.get('/api/image').status_code == 400

    def test_indexed_but_deleted(self, client, indexed):
        path = indexed / 'img_00.png'
        path.unlink()
        response = client.get('/api/image', query_string={'path': str(path)})
        assert response.status_code == 404


class TestMaintenanceRoutes:
    """Test root deletion and pruning."""

    def test_delete_root(self, client, indexed):
        response = client.delete('/api/roots', json={'path': str(indexed)})
        assert response.status_code == 200
        assert response.get_json()['deleted'] == 10
        assert client.get('/api/roots').get_json()['roots'] == []
        assert response.get_json()['registered'] is True

    def test_delete_root_query_string(self, client, indexed):
        response = client.delete('/api/roots', query_string={'path': str(indexed)})
        assert response.status_code == 200

    def test_delete_unknown_root(self, client, temp_dir):
        response = client.delete('/api/roots', json={'path': str(temp_dir / 'nope')})
        assert response.status_code == 200
        data = response.get_json()
        assert data['registered'] is False
        assert data['deleted'] == 0

    def test_delete_unregistered_root_clears_orphans(self, client, finder, indexed):
        finder.registry.remove(indexed)
        response = client.delete('/api/roots', json={'path': str(indexed)})
        assert response.status_code == 200
        assert response.get_json()['deleted'] == 10
        assert finder.store.count() == 0

    def test_delete_root_requires_path(self, client):
        assert client.delete('/api/roots', json={}).status_code == 400

    def test_delete_while_busy(self, client, finder, indexed):
        finder._run_lock.acquire()
        try:
            response = client.delete('/api/roots', json={'path': str(indexed)})
        finally:
            finder._run_lock.release()
        assert response.status_code == 409

    def test_prune(self, client, indexed):
        (indexed / 'img_09.png').unlink()
        response = client.post('/api/prune')
        assert response.status_code == 200
        assert response.get_json()['removed'] == 1


class FakeFinder:
    def __init__(self, error=None, result=None):
        self.error = error
        self.result = result

    def index_folder(self, directory, progress_callback=None, cancel_event=None, workers=None):
        if progress_callback:
            progress_callback(IndexProgress(processed=1, total=2, current_file='a.jpg', eta_seconds=65))
        if self.error:
            raise self.error
        return self.result


class TestIndexJob:
    """Test IndexJob outcome mapping."""

    def _run(self, finder):
        state = IndexState()
        assert state.begin('/data')
        IndexJob(finder, state, '/data').run()
        return state

    def test_complete(self):
        state = self._run(FakeFinder(result=IndexResult(indexed=2, total=2)))
        assert state.status == 'complete'
        assert state.message == 'Indexed 2 of 2 images'

    def test_cancelled(self):
        state = self._run(FakeFinder(result=IndexResult(indexed=1, total=2, cancelled=True)))
        assert state.status == 'cancelled'

    def test_storage_error(self):
        state = self._run(FakeFinder(error=StorageError('disk full', committed=50)))
        assert state.status == 'error'
        assert '50 images were saved' in state.error

    def test_enumeration_error(self):
        state = self._run(FakeFinder(error=EnumerationError('Not a directory: /data')))
        assert state.status == 'error'
        assert state.error == 'Not a directory: /data'

    def test_unexpected_error(self):
        state = self._run(FakeFinder(error=RuntimeError('boom')))
        assert state.status == 'error'

    def test_progress_message(self):
        message = IndexJob.progress_message(IndexProgress(processed=1, total=2, eta_seconds=65))
        assert message == 'Indexing images: 1/2 (ETA 1m 05s)'


class TestIndexState:
    """Test IndexState transitions."""

    def test_begin_twice(self):
        state = IndexState()
        assert state.begin('/a')
        assert not state.begin('/b')
        assert state.directory == '/a'

    def test_begin_after_completion(self):
        state = IndexState()
        state.begin('/a')
        state.complete(IndexResult(indexed=1, total=1), 'done')
        assert state.begin('/b')
        assert state.result is None

    def test_apply_progress(self):
        state = IndexState()
        state.begin('/a')
        state.apply_progress(IndexProgress(processed=5, total=10, current_file='x.jpg', eta_seconds=3.0))
        data = state.to_dict()
        assert data['processed'] == 5
        assert data['progress'] == 0.5
        assert data['current_file'] == 'x.jpg'
        assert data['eta_seconds'] == 3.0

    def test_request_cancel_needs_running_job(self):
        state = IndexState()
        assert not state.request_cancel()
        state.begin('/a')
        assert state.request_cancel()
        assert state.cancel_requested

    def test_begin_clears_cancel(self):
        state = IndexState()
        state.begin('/a')
        state.request_cancel()
        state.fail('stopped')
        state.begin('/b')
        assert not state.cancel_requested
