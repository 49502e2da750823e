import pytest

from antakshari_mcp.corpus import CorpusIndex, Verse
from antakshari_mcp.oracle import OracleResult

AHAM = Verse(text="अहम् ब्रह्म अस्मि", next_char="म")

YADA = Verse(
    text="यदा यदा हि धर्मस्य ग्लानिर्भवति भारत ।\nअभ्युत्थानमधर्मस्य तदात्मानं सृजाम्यहम् ॥",
    next_char="म",
)
MOOKAM = Verse(
    text="मूकं करोति वाचालं पङ्गुं लङ्घयते गिरिम् ।\nयत्कृपा तमहं वन्दे परमानन्दमाधवम् ॥",
    next_char="म",
)
MANOJAVAM = Verse(
    text="मनोजवं मारुततुल्यवेगं जितेन्द्रियं बुद्धिमतां वरिष्ठम् ।\nवातात्मजं वानरयूथमुख्यं श्रीरामदूतं शरणं प्रपद्ये ॥",
    next_char="य",
)
KARMANY = Verse(
    text="कर्मण्येवाधिकारस्ते मा फलेषु कदाचन ।\nमा कर्मफलहेतुर्भूर्मा ते सङ्गोऽस्त्वकर्मणि ॥",
    next_char="ण",
)
GANGE = Verse(
    text="गङ्गे च यमुने चैव गोदावरि सरस्वति ।\nनर्मदे सिन्धु कावेरि जलेऽस्मिन् सन्निधिं कुरु ॥",
    next_char="र",
)
DHARMA = Verse(
    text="धर्मक्षेत्रे कुरुक्षेत्रे समवेता युयुत्सवः ।\nमामकाः पाण्डवाश्चैव किमकुर्वत सञ्जय ॥",
    next_char="य",
)


class StubOracle:
    """Records requests and returns a canned result or raises a canned error.

    With a gate, the call blocks until the event is set.
    """

    def __init__(self, result: OracleResult | None = None, error: Exception | None = None, gate=None):
        self.result = result
        self.error = error
        self.gate = gate
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def game_corpus():
    return CorpusIndex([YADA, MOOKAM, MANOJAVAM, KARMANY, GANGE, DHARMA])
