"""
Outbound message transports.

Each provider wraps one vendor HTTP API with ``requests`` and returns the
vendor's message id. Credentials come from the stored CommunicationProvider
record; blank fields fall back to settings and the environment, read when
the provider is built.
"""
import os
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TWILIO_API_URL = 'https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json'
WHATSAPP_API_URL = 'https://graph.facebook.com/v17.0/{phone_number_id}/messages'
SENDGRID_API_URL = 'https://api.sendgrid.com/v3/mail/send'


class ProviderError(Exception):
    """Raised when a transport call fails"""


def _credential(value, setting_name):
    if value:
        return value
    return getattr(settings, setting_name, '') or os.getenv(setting_name, '')


def _timeout():
    return getattr(settings, 'PROVIDER_REQUEST_TIMEOUT', 15)


class BaseProvider:
    name = None

    def __init__(self, config):
        self.config = config

    def send(self, recipient, content, subject=None):
        raise NotImplementedError

    def _post(self, url, **kwargs):
        try:
            response = requests.post(url, timeout=_timeout(), **kwargs)
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"{self.name} request failed: {e}") from e
        if response.status_code >= 400:
            raise ProviderError(f"{self.name} returned HTTP {response.status_code}: {response.text[:200]}")
        return response

    def _json(self, response):
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} returned an unreadable body: {e}") from e
        if not isinstance(body, dict):
            raise ProviderError(f"{self.name} returned an unexpected body")
        return body


class TwilioSMSProvider(BaseProvider):
    name = 'TWILIO'

    def send(self, recipient, content, subject=None):
        account_sid = _credential(self.config.account_sid, 'TWILIO_ACCOUNT_SID')
        auth_token = _credential(self.config.api_secret or self.config.api_key, 'TWILIO_AUTH_TOKEN')
        from_number = _credential(self.config.from_number, 'TWILIO_FROM_NUMBER')
        if not account_sid or not auth_token:
            raise ProviderError('Twilio credentials are not configured')

        response = self._post(
            TWILIO_API_URL.format(sid=account_sid),
            data={'From': from_number, 'To': recipient, 'Body': content},
            auth=(account_sid, auth_token),
        )
        return self._json(response).get('sid', '')


class WhatsAppBusinessProvider(BaseProvider):
    name = 'WHATSAPP_BUSINESS'

    def send(self, recipient, content, subject=None):
        token = _credential(self.config.api_key, 'WHATSAPP_API_TOKEN')
        phone_number_id = _credential(self.config.account_id, 'WHATSAPP_PHONE_NUMBER_ID')
        if not token:
            raise ProviderError('WhatsApp API token is not configured')
        url = self.config.webhook_url or WHATSAPP_API_URL.format(phone_number_id=phone_number_id)

        response = self._post(
            url,
            json={
                'messaging_product': 'whatsapp',
                'to': recipient,
                'type': 'text',
                'text': {'body': content},
            },
            headers={'Authorization': f'Bearer {token}'},
        )
        messages = self._json(response).get('messages') or [{}]
        return messages[0].get('id', '')


class SendGridEmailProvider(BaseProvider):
    name = 'SENDGRID'

    def send(self, recipient, content, subject=None):
        api_key = _credential(self.config.api_key, 'SENDGRID_API_KEY')
        from_email = _credential(self.config.from_email, 'SENDGRID_FROM_EMAIL')
        if not api_key:
            raise ProviderError('SendGrid API key is not configured')

        response = self._post(
            SENDGRID_API_URL,
            json={
                'personalizations': [{'to': [{'email': recipient}]}],
                'from': {'email': from_email},
                'subject': subject or '',
                'content': [{'type': 'text/plain', 'value': content}],
            },
            headers={'Authorization': f'Bearer {api_key}'},
        )
        # SendGrid answers 202 with an empty body; the id is in a header
        return response.headers.get('X-Message-Id', 'sent')


PROVIDER_CLASSES = {
    'TWILIO': TwilioSMSProvider,
    'WHATSAPP_BUSINESS': WhatsAppBusinessProvider,
    'SENDGRID': SendGridEmailProvider,
}


def get_provider(config):
    """Build the transport named by a CommunicationProvider record"""
    provider_class = PROVIDER_CLASSES.get(config.provider)
    if provider_class is None:
        raise ProviderError(f"Provider {config.provider} is not supported")
    return provider_class(config)
