"""
Static coaching content for the Sprint Final All-In campaign.

- KNOWLEDGE_BASE: document chunked for local retrieval and sent to the LLM
- QUICK_ACTIONS: scripted questions with rotating answer variations
- DIAGNOSTIC_QUESTIONS: questions run by the /test chat command
"""

from dataclasses import dataclass
from typing import Tuple

KNOWLEDGE_BASE = """
# ESTRATÉGIA SPRINT FINAL ALL-IN

## Meta Financeira
- **Meta Diária:** 3 pares de tênis vendidos.
- **Lucro Unitário:** R$ 244,50 por par.
- **Duração:** 14 dias (08/12 a 22/12).
- **Lucro Total Projetado:** R$ 10.269,00.

## Os 4 Pilares da Venda
1. **Ativação (Clientes Antigos):** É mais fácil vender para quem já confia em você. Aborde individualmente no WhatsApp. "Lembrei de você com essa nova cor".
2. **Prospecção (Novos Clientes):** Meta de adicionar 5 novos contatos na agenda por dia. Use redes sociais e indicações.
3. **Rotina Digital:** Stories diários geram desejo. Mostre bastidores, prova social (clientes usando) e enquetes.
4. **Venda Presencial (O Acelerador):** Nada supera a experiência de calçar o tênis.
   - Ande sempre com um par demonstrativo.
   - Script: "Experimenta rapidinho, só 10 segundos".
   - O conforto vende o produto.

## Rotina Sugerida
- **Manhã:** Venda Presencial. Visite comércios locais, academias, salões. Foco em colocar o tênis no pé do cliente.
- **Tarde:** Ativação e Follow-up. Chame clientes antigos e cobre quem ficou de pensar.
- **Noite:** Organização e Digital. Poste stories de "estoque acabando", responda caixinhas de perguntas.

## Argumentos de Venda
- **Tecnologia Terapêutica:** Magnetoterapia e Infravermelho longo. Ajuda na circulação e dores.
- **Conforto:** Tecido Knit respirável e leve.
- **Exclusividade:** Modelo All-In com design moderno.

## Prêmio Extra
Distribuidores que atingirem 45 pares (ou R$ 11k em compras) ganham um produto lançamento na próxima convenção.
"""

SOURCE_SUFFIX = "\n\n(Fonte: Base de Conhecimento Interna)"

EMPTY_QUERY_MESSAGE = "Por favor, faça uma pergunta mais específica sobre a estratégia de vendas."

NOT_FOUND_MESSAGE = (
    "Não encontrei informações exatas sobre isso no manual 'Sprint Final'. "
    "Tente perguntar sobre: Metas, Abordagem Presencial, 4 Pilares ou Lucro."
)


@dataclass(frozen=True)
class QuickAction:
    label: str
    question: str
    variations: Tuple[str, ...]


QUICK_ACTIONS: Tuple[QuickAction, ...] = (
    QuickAction(
        label="Potencial de Lucro",
        question="Qual é o meu potencial de lucro?",
        variations=(
            "Se você seguir o plano de 3 pares/dia por 14 dias, seu lucro total será de **R$ 10.269,00** "
            "(baseado em R$ 244,50 de lucro por par).",
            "Com consistência na execução, você pode faturar **R$ 10.269,00** em apenas 14 dias. "
            "O segredo está na disciplina diária!",
            "Imagine só: **R$ 10.269,00** no bolso ao final dessa campanha. "
            "É isso que você pode conquistar com 3 pares vendidos por dia.",
        ),
    ),
    QuickAction(
        label="Estratégia Presencial",
        question="Como vender presencialmente?",
        variations=(
            'O segredo é a PROVA. Saia com o tênis. Aborde: "Posso te mostrar por que esse tênis virou febre? '
            'Só 10 segundos no pé". Quando o cliente sente o conforto, a venda fecha.',
            'Na venda presencial, a prova é tudo! Vista o tênis e mostre: "Testa 10 segundos". '
            'O conforto imediato convence mais que mil palavras.',
            'A venda presencial é poderosa! Com o tênis na mão: "Experimenta rapidinho". '
            'O cliente sente o conforto e fecha a compra.',
        ),
    ),
    QuickAction(
        label="Minha Rotina",
        question="Qual deve ser minha rotina?",
        variations=(
            "**Manhã:** Venda Presencial (Rua/Visitas).\n"
            "**Tarde:** Ativação de clientes antigos (WhatsApp).\n"
            "**Noite:** Digital (Stories e novos contatos).",
            "Sua rotina de sucesso:\n**Manhã:** Venda presencial\n**Tarde:** Ativação de contatos\n"
            "**Noite:** Marketing digital",
            "Organize seu dia assim:\n- Manhã: Saia com o tênis e venda presencial\n"
            "- Tarde: Contate clientes antigos\n- Noite: Poste nas redes sociais",
        ),
    ),
    QuickAction(
        label="Os 4 Pilares",
        question="Quais são os 4 pilares?",
        variations=(
            "1. Ativação (Clientes Antigos)\n2. Prospecção (Novos)\n3. Rotina Digital\n"
            "4. Venda Presencial (O mais forte!).",
            "Os 4 pilares que garantem seu sucesso:\n1. Reative clientes antigos\n2. Prospere novos contatos\n"
            "3. Mantenha presença digital\n4. Venda diretamente na rua",
            "Estratégia vencedora:\n- Ativação de carteira\n- Prospecção ativa\n- Presença digital\n"
            "- Venda presencial",
        ),
    ),
)

DIAGNOSTIC_QUESTIONS: Tuple[str, ...] = (
    "Qual é a meta de vendas?",
    "Como funciona a venda presencial?",
    "Quais são os 4 pilares?",
    "O que falar se o cliente achar caro?",
    "Qual o lucro total?",
    "Como prospectar novos clientes?",
    "O que postar no instagram?",
    "Como abordar cliente antigo?",
    "Rotina da manhã",
    "Rotina da noite",
)
