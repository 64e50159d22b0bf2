import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from subtitle_bridge.core.exceptions import BackendError, ResponseFormatError
from subtitle_bridge.translators import ChatCompletionsTranslator, MistralTranslator, TranslatorFactory
from subtitle_bridge.translators.chat_translator import MISTRAL_API_URL


def _serve(handler, scenario):
    """Run ``scenario(backend, received)`` against a local completions endpoint."""

    async def run():
        received = []

        async def endpoint(request):
            received.append({
                'headers': dict(request.headers),
                'json': await request.json(),
            })
            return await handler(request)

        app = web.Application()
        app.router.add_post('/v1/chat/completions', endpoint)
        server = test_utils.TestServer(app)
        await server.start_server()
        backend = ChatCompletionsTranslator({
            'endpoint': str(server.make_url('/v1/chat/completions')),
            'api_key': 'secret',
            'timeout': 5,
        })
        try:
            return await scenario(backend, received)
        finally:
            await backend.close()
            await server.close()

    return asyncio.run(run())


def test_successful_completion_returns_message_content():
    async def handler(request):
        return web.json_response({'choices': [{'message': {'role': 'assistant', 'content': 'Bonjour'}}]})

    async def scenario(backend, received):
        reply = await backend.chat([{'role': 'user', 'content': 'Hello'}], model='test-model', max_tokens=50)
        return reply, received

    reply, received = _serve(handler, scenario)

    assert reply == 'Bonjour'
    assert received[0]['headers']['Authorization'] == 'Bearer secret'
    assert received[0]['json'] == {
        'model': 'test-model',
        'messages': [{'role': 'user', 'content': 'Hello'}],
        'temperature': 0.3,
        'max_tokens': 50,
    }


def test_non_2xx_raises_backend_error_with_status():
    async def handler(request):
        return web.json_response({'error': 'rate limited'}, status=429)

    async def scenario(backend, received):
        with pytest.raises(BackendError) as excinfo:
            await backend.chat([{'role': 'user', 'content': 'Hi'}], model='m')
        return excinfo.value

    error = _serve(handler, scenario)
    assert error.status == 429
    assert 'rate limited' in str(error)


def test_reply_without_choices_is_a_format_error():
    async def handler(request):
        return web.json_response({'id': 'x', 'choices': []})

    async def scenario(backend, received):
        with pytest.raises(ResponseFormatError):
            await backend.chat([{'role': 'user', 'content': 'Hi'}], model='m')

    _serve(handler, scenario)


def test_non_json_body_is_a_format_error():
    async def handler(request):
        return web.Response(text='<html>oops</html>', content_type='text/html')

    async def scenario(backend, received):
        with pytest.raises(ResponseFormatError):
            await backend.chat([{'role': 'user', 'content': 'Hi'}], model='m')

    _serve(handler, scenario)


def test_session_is_reused_and_closed():
    async def handler(request):
        return web.json_response({'choices': [{'text': 'legacy completion'}]})

    async def scenario(backend, received):
        first = await backend.chat([{'role': 'user', 'content': 'a'}], model='m')
        session = backend.session
        second = await backend.chat([{'role': 'user', 'content': 'b'}], model='m')
        assert backend.session is session
        await backend.close()
        return first, second, session.closed, backend.session

    first, second, closed, session = _serve(handler, scenario)
    assert first == second == 'legacy completion'
    assert closed
    assert session is None


def test_unreachable_endpoint_raises_backend_error():
    async def scenario():
        backend = ChatCompletionsTranslator({'endpoint': 'http://127.0.0.1:9/v1/chat/completions', 'timeout': 2})
        try:
            with pytest.raises(BackendError):
                await backend.chat([{'role': 'user', 'content': 'Hi'}], model='m')
        finally:
            await backend.close()

    asyncio.run(scenario())


def test_factory_presets():
    backend = TranslatorFactory.create_translator('mistral', {'api_key': 'k'})
    assert isinstance(backend, MistralTranslator)
    assert backend.endpoint == MISTRAL_API_URL
    assert TranslatorFactory.api_key_env('mistral') == 'MISTRAL_API_KEY'
    assert TranslatorFactory.api_key_env('openai') == 'OPENAI_API_KEY'
    assert TranslatorFactory.api_key_env('missing') is None

    with pytest.raises(ValueError):
        TranslatorFactory.create_translator('missing')


def test_factory_rejects_non_backend_classes():
    with pytest.raises(TypeError):
        TranslatorFactory.register_translator('bad', dict)


def test_factory_rejects_instances_and_lists_choices():
    with pytest.raises(TypeError):
        TranslatorFactory.register_translator('bad', ChatCompletionsTranslator())

    with pytest.raises(ValueError) as excinfo:
        TranslatorFactory.create_translator('missing')
    assert 'mistral' in str(excinfo.value)
    assert 'openai' in str(excinfo.value)
