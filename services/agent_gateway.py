"""
Agent Gateway Service - invokes the hosted dispute agents over HTTP
"""
import json
import os
from typing import Any, Dict, Optional

import requests

from models.agent_response import AgentReply, AgentResponse, AgentRole
from services.mock_agent_responses import get_mock_response
from utils.logging_config import get_logger

logger = get_logger('services.agent_gateway')

DEFAULT_AGENT_IDS: Dict[AgentRole, str] = {
    AgentRole.INTAKE: '696147c7c57d451439d4cd48',
    AgentRole.LOOKUP: '696147dfd09b552363344543',
    AgentRole.COMPLIANCE: '696147f4d09b552363344544',
    AgentRole.SYNTHESIS: '6961480bd09b552363344546',
    AgentRole.RESOLUTION: '69614825d09b55236334454c',
    AgentRole.ORCHESTRATOR: '69614847d09b55236334454d',
}


class AgentGateway:
    """
    Service for calling the hosted agents

    Every call returns an AgentResponse; transport and decoding problems are
    reported as a failed envelope rather than raised.
    """

    def __init__(self):
        self.api_url = os.getenv('AGENT_API_URL')
        self.api_key = os.getenv('AGENT_API_KEY')
        self.timeout = float(os.getenv('AGENT_TIMEOUT_SECONDS', '60'))
        self.agent_ids = {
            role: os.getenv(f'AGENT_ID_{role.name}', default_id)
            for role, default_id in DEFAULT_AGENT_IDS.items()
        }

        self.session = requests.Session()

        if self.api_url and self.api_key:
            self.session.headers.update({
                'x-api-key': self.api_key,
                'Content-Type': 'application/json'
            })
            self.use_mock = False
            logger.info(f"✅ [GATEWAY] Agent API configured at {self.api_url}")
        else:
            self.use_mock = True
            logger.warning("⚠️ [GATEWAY] Missing agent API credentials, using mock responses")

    def invoke(self, message: str, role: AgentRole) -> AgentResponse:
        """
        Send one message to the agent playing ``role``
        """
        agent_id = self.agent_ids[role]
        logger.info(f"🤖 [GATEWAY] Invoking {role.value} agent ({agent_id})")

        if self.use_mock:
            return self.normalize_response(get_mock_response(message, role))

        try:
            response = self.session.post(
                self.api_url,
                json={'message': message, 'agent_id': agent_id},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"❌ [GATEWAY] {role.value} agent call failed: {e}")
            return AgentResponse.failure(f"Agent request failed: {e}")

        if response.status_code != 200:
            logger.error(f"❌ [GATEWAY] {role.value} agent returned {response.status_code} - {response.text}")
            return AgentResponse.failure(f"Agent returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"❌ [GATEWAY] {role.value} agent returned a non-JSON body: {e}")
            return AgentResponse.failure('Agent returned an unreadable response')

        envelope = self.normalize_response(body)
        if envelope.success:
            logger.info(f"✅ [GATEWAY] {role.value} agent replied")
        else:
            logger.warning(f"⚠️ [GATEWAY] {role.value} agent reported failure: {envelope.error}")
        return envelope

    @staticmethod
    def normalize_response(body: Any) -> AgentResponse:
        """
        Normalize an agent API body into an AgentResponse

        Accepts ``{"success", "response", "error"}`` as well as a bare reply
        object. A reply given as a string is decoded when it holds a JSON object
        and otherwise treated as the message.
        """
        if not isinstance(body, dict):
            return AgentResponse.failure('Agent returned an unexpected response shape')

        if body.get('success') is False:
            return AgentResponse.failure(body.get('error') or 'Agent reported a failure')

        reply = body['response'] if 'response' in body else body
        reply = _decode_reply(reply)
        if reply is None:
            return AgentResponse.failure('Agent returned an empty response')

        message = reply.get('message')
        return AgentResponse(
            success=True,
            response=AgentReply(
                message=message if isinstance(message, str) else None,
                result=reply.get('result')
            )
        )


def _decode_reply(reply: Any) -> Optional[Dict[str, Any]]:
    if isinstance(reply, str):
        if not reply.strip():
            return None
        try:
            decoded = json.loads(reply)
        except json.JSONDecodeError:
            return {'message': reply}
        return decoded if isinstance(decoded, dict) else {'message': reply}
    if isinstance(reply, dict):
        return reply or None
    return None
